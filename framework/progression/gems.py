"""
Battle rewards - experience payouts and gem currency.

AI battles pay a fixed gem reward; PvP battles steal a share of the
opponent's gems instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from framework.components.card import CardStats
from framework.progression.experience import Difficulty, difficulty_from_ratio

BASE_EXPERIENCE = 50
VICTORY_BONUS = 25
EXPERIENCE_MULTIPLIERS: dict[Difficulty, float] = {
    Difficulty.EASY: 1.0,
    Difficulty.NORMAL: 1.2,
    Difficulty.HARD: 1.5,
    Difficulty.EXPERT: 2.0,
}

BASE_GEM_REWARD = 10
GEM_MULTIPLIERS: dict[Difficulty, float] = {
    Difficulty.EASY: 0.8,
    Difficulty.NORMAL: 1.0,
    Difficulty.HARD: 1.3,
    Difficulty.EXPERT: 1.6,
}
# Trainer level -> multiplier; levels above 10 use the level 10 value
TRAINER_LEVEL_MULTIPLIERS: dict[int, float] = {
    1: 1.0, 2: 1.1, 3: 1.2, 4: 1.3, 5: 1.4,
    6: 1.5, 7: 1.6, 8: 1.7, 9: 1.8, 10: 2.0,
}

GEM_THEFT_PERCENTAGE = 0.15
MIN_GEM_THEFT_AMOUNT = 5
MAX_GEM_THEFT_AMOUNT = 100
MAX_GEMS_PER_BATTLE = 200


@dataclass(frozen=True)
class ExperienceCalculation:
    """Breakdown of experience earned in a battle."""
    base_experience: int
    difficulty_multiplier: float
    victory_bonus: int
    total_experience: int


@dataclass(frozen=True)
class GemRewards:
    """Gems earned from a battle."""
    victory_gems: int
    stolen_gems: int

    @property
    def total_gems(self) -> int:
        return validate_gem_reward(self.victory_gems + self.stolen_gems)


def validate_gem_reward(amount: float, max_allowed: int = MAX_GEMS_PER_BATTLE) -> int:
    """Clamp a gem amount to [0, max_allowed] and drop fractions."""
    if math.isnan(amount) or amount < 0:
        return 0
    if amount > max_allowed:
        return max_allowed
    return math.floor(amount)


def trainer_level_multiplier(trainer_level: int) -> float:
    """Get the gem multiplier for a trainer level."""
    return TRAINER_LEVEL_MULTIPLIERS.get(max(1, min(trainer_level, 10)), 2.0)


def determine_gem_difficulty(player: CardStats, opponent: CardStats) -> Difficulty:
    """Difficulty for gem payouts, weighting attack above HP."""
    def power(stats: CardStats) -> float:
        return stats.attack * 1.2 + stats.defense * 1.0 + stats.hp * 0.8

    return difficulty_from_ratio(power(opponent), power(player))


class RewardCalculator:
    """Converts a battle outcome and difficulty into experience and gems."""

    def compute_experience(
        self,
        opponent_level: int = 1,
        difficulty: Difficulty = Difficulty.NORMAL,
        is_victory: bool = True,
    ) -> ExperienceCalculation:
        """Experience for a battle against an opponent of ``opponent_level``."""
        base = BASE_EXPERIENCE + opponent_level * 10
        multiplier = EXPERIENCE_MULTIPLIERS.get(difficulty, 1.0)
        bonus = VICTORY_BONUS if is_victory else 0

        return ExperienceCalculation(
            base_experience=base,
            difficulty_multiplier=multiplier,
            victory_bonus=bonus,
            total_experience=math.floor(base * multiplier + bonus),
        )

    def compute_gem_reward(
        self,
        trainer_level: int,
        difficulty: Difficulty = Difficulty.NORMAL,
        opponent_level: int = 1,
    ) -> int:
        """Gems paid for beating an AI opponent."""
        base = BASE_GEM_REWARD + opponent_level * 2
        adjusted = math.floor(base * GEM_MULTIPLIERS.get(difficulty, 1.0))
        return math.floor(adjusted * trainer_level_multiplier(trainer_level))

    def compute_gem_theft(
        self,
        opponent_gems: int,
        trainer_level: int,
        difficulty: Difficulty = Difficulty.NORMAL,
    ) -> int:
        """
        Gems stolen from a PvP opponent.

        15% of the opponent's gems, +2% per trainer level above 1, scaled
        by difficulty, then clamped to [5, min(100, opponent_gems)].
        """
        if opponent_gems <= 0:
            return 0

        base = math.floor(opponent_gems * GEM_THEFT_PERCENTAGE)
        level_adjusted = math.floor(base * (1.0 + (trainer_level - 1) * 0.02))
        adjusted = math.floor(level_adjusted * GEM_MULTIPLIERS.get(difficulty, 1.0))

        return min(
            max(MIN_GEM_THEFT_AMOUNT, adjusted),
            min(MAX_GEM_THEFT_AMOUNT, opponent_gems),
        )

    def compute_gem_rewards(
        self,
        is_victory: bool,
        is_pvp: bool,
        player_level: int,
        difficulty: Difficulty = Difficulty.NORMAL,
        opponent_gems: int = 0,
        opponent_level: int = 1,
    ) -> GemRewards:
        """Combine victory payout and theft for a finished battle."""
        if not is_victory:
            return GemRewards(victory_gems=0, stolen_gems=0)

        if is_pvp:
            stolen = self.compute_gem_theft(opponent_gems, player_level, difficulty)
            return GemRewards(victory_gems=0, stolen_gems=validate_gem_reward(stolen))

        earned = self.compute_gem_reward(player_level, difficulty, opponent_level)
        return GemRewards(victory_gems=validate_gem_reward(earned), stolen_gems=0)


def fallback_rewards(player_level: Optional[int]) -> tuple[int, int]:
    """
    Conservative (experience, gems) used when reward calculation fails.

    Only scales with level and is not expected to match the calculators.
    """
    level = player_level if player_level and player_level > 0 else 1
    return max(5, level * 2), max(1, level // 2)

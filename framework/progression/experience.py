"""
Experience system - level curve, level-ups and stat growth.

Levels follow an exponential curve: reaching level L + 1 from level L
costs ``floor(100 * 1.5 ** (L - 1))`` experience. Levels cap at 100.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from framework.components.card import CardStats

MAX_LEVEL = 100


class Difficulty(Enum):
    """Battle difficulty, judged from relative creature strength."""
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"
    EXPERT = "expert"


@dataclass(frozen=True)
class LevelProgression:
    """Result of adding experience to a creature."""
    current_level: int
    current_experience: int
    experience_to_next_level: int
    experience_gained: int
    leveled_up: bool

    @property
    def new_level(self) -> int:
        return self.current_level


@dataclass(frozen=True)
class StatIncreases:
    """Stat growth from one or more level-ups."""
    hp: int
    attack: int
    defense: int
    previous_level: int
    new_level: int

    @property
    def levels_gained(self) -> int:
        return self.new_level - self.previous_level


def experience_for_level(level: int) -> int:
    """Experience needed to go from ``level`` to ``level + 1``."""
    return math.floor(100 * math.pow(1.5, level - 1))


def total_experience_for_level(level: int) -> int:
    """Total experience needed to reach ``level`` from level 1."""
    return sum(experience_for_level(i) for i in range(1, level))


def level_from_experience(total_experience: int) -> int:
    """Get the level (1-100) for a lifetime experience total."""
    level = 1
    used = 0

    while level < MAX_LEVEL:
        needed = experience_for_level(level)
        if used + needed > total_experience:
            break
        used += needed
        level += 1

    return level


def experience_in_current_level(total_experience: int, current_level: int) -> int:
    """Experience accumulated inside ``current_level``."""
    return total_experience - total_experience_for_level(current_level)


def determine_difficulty(player: CardStats, opponent: CardStats) -> Difficulty:
    """
    Judge difficulty from the ratio of plain stat sums.

    opponent / player >= 1.5 is EXPERT, >= 1.2 HARD, >= 0.8 NORMAL,
    anything weaker EASY.
    """
    player_power = player.attack + player.defense + player.hp
    opponent_power = opponent.attack + opponent.defense + opponent.hp
    return difficulty_from_ratio(opponent_power, player_power)


def difficulty_from_ratio(opponent_power: float, player_power: float) -> Difficulty:
    if player_power <= 0:
        return Difficulty.EXPERT if opponent_power > 0 else Difficulty.NORMAL

    ratio = opponent_power / player_power
    if ratio >= 1.5:
        return Difficulty.EXPERT
    if ratio >= 1.2:
        return Difficulty.HARD
    if ratio >= 0.8:
        return Difficulty.NORMAL
    return Difficulty.EASY


class ProgressionCalculator:
    """
    Converts experience into levels and stat growth.

    Args:
        rng: Random source for stat growth variance (injected for tests)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def compute_level_up(
        self,
        current_level: int,
        current_xp: int,
        xp_gained: int,
    ) -> LevelProgression:
        """
        Add experience and resolve level-ups.

        Several levels can be gained from a single battle.

        Args:
            current_level: Level before the battle
            current_xp: Experience inside the current level
            xp_gained: Experience earned

        Returns:
            LevelProgression with the resulting level
        """
        new_level = current_level
        remaining = current_xp + xp_gained

        while new_level < MAX_LEVEL:
            needed = experience_for_level(new_level)
            if remaining < needed:
                break
            remaining -= needed
            new_level += 1

        to_next = experience_for_level(new_level) - remaining if new_level < MAX_LEVEL else 0

        return LevelProgression(
            current_level=new_level,
            current_experience=remaining,
            experience_to_next_level=to_next,
            experience_gained=xp_gained,
            leveled_up=new_level > current_level,
        )

    def compute_stat_increases(
        self,
        old_level: int,
        new_level: int,
        base_stats: CardStats,
    ) -> StatIncreases:
        """
        Compute stat growth for the levels gained.

        Each level adds 10-15% of base attack/defense and 15-25% of base HP,
        with at least +1 attack, +1 defense and +2 HP.
        """
        levels = new_level - old_level

        if levels <= 0:
            return StatIncreases(
                hp=0,
                attack=0,
                defense=0,
                previous_level=old_level,
                new_level=new_level,
            )

        def grow(base: int, fixed: float, spread: float) -> int:
            return math.floor(base * fixed * levels + self.rng.random() * base * spread * levels)

        return StatIncreases(
            hp=max(2, grow(base_stats.hp, 0.15, 0.1)),
            attack=max(1, grow(base_stats.attack, 0.1, 0.05)),
            defense=max(1, grow(base_stats.defense, 0.1, 0.05)),
            previous_level=old_level,
            new_level=new_level,
        )

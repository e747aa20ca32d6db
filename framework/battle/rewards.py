"""
Battle rewards - turning a victory into experience, level-ups and gems.

Rewards are applied in two phases:
1. grant(): computed and applied to the in-battle card right away, so
   the results screen always has something to show.
2. persist(): a best-effort durable write. Failures are reported as log
   messages and never roll back the local result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from framework.battle.actor import BattleCreature, battle_stats
from framework.battle.state import PostBattleRewards
from framework.components.card import Card
from framework.progression.experience import (
    ProgressionCalculator,
    determine_difficulty,
    experience_in_current_level,
    level_from_experience,
)
from framework.progression.gems import (
    RewardCalculator,
    determine_gem_difficulty,
    fallback_rewards,
)
from framework.save.progress import PersistenceGateway, apply_progression, is_network_error

logger = logging.getLogger(__name__)

NETWORK_FAILURE_MESSAGE = "Network error: Rewards may be delayed. Check your connection."
SAVE_FAILURE_MESSAGE = "Warning: Failed to save some reward data. Please check your progress."


@dataclass(frozen=True)
class RewardGrant:
    """Rewards plus the player card they were applied to."""
    rewards: PostBattleRewards
    card: Card
    messages: tuple[str, ...]


@dataclass(frozen=True)
class PersistResult:
    """Outcome of a durable reward write."""
    card: Optional[Card] = None
    total_gems: Optional[int] = None
    messages: tuple[str, ...] = ()
    failed: bool = False
    network_error: bool = False


class RewardOrchestrator:
    """
    Computes, applies and persists post-battle rewards.

    Args:
        progression: Level-up collaborator (compute_level_up, compute_stat_increases)
        calculator: Reward collaborator (compute_experience, compute_gem_rewards)
        persistence: Durable store; None keeps rewards local only
    """

    def __init__(
        self,
        progression: Optional[Any] = None,
        calculator: Optional[Any] = None,
        persistence: Optional[PersistenceGateway] = None,
    ):
        self.progression = progression or ProgressionCalculator()
        self.calculator = calculator or RewardCalculator()
        self.persistence = persistence

    @staticmethod
    def fallback(player_level: int) -> PostBattleRewards:
        """Level-scaled rewards used when calculation fails."""
        experience, gems = fallback_rewards(player_level)
        return PostBattleRewards(
            experience_gained=experience,
            gems_earned=gems,
            gems_stolen=0,
            level_up=False,
            stat_increases=None,
        )

    def compute(
        self,
        player: BattleCreature,
        opponent: BattleCreature,
        is_pvp: bool = False,
        opponent_gems: int = 0,
    ) -> PostBattleRewards:
        """
        Compute rewards for a player victory.

        Any collaborator failure is logged and replaced by fallback().
        """
        player_level = level_from_experience(player.card.xp)

        try:
            player_stats = battle_stats(player.card)
            opponent_stats = battle_stats(opponent.card)
            opponent_level = level_from_experience(opponent.card.xp)

            experience = self.calculator.compute_experience(
                opponent_level,
                determine_difficulty(player_stats, opponent_stats),
                True,
            )
            progression = self.progression.compute_level_up(
                player_level,
                experience_in_current_level(player.card.xp, player_level),
                experience.total_experience,
            )

            stat_increases = None
            if progression.leveled_up:
                stat_increases = self.progression.compute_stat_increases(
                    player_level, progression.current_level, player_stats,
                )

            gems = self.calculator.compute_gem_rewards(
                True,
                is_pvp,
                player_level,
                determine_gem_difficulty(player_stats, opponent_stats),
                opponent_gems,
                opponent_level,
            )

            return PostBattleRewards(
                experience_gained=experience.total_experience,
                gems_earned=gems.victory_gems,
                gems_stolen=gems.stolen_gems,
                level_up=progression.leveled_up,
                stat_increases=stat_increases,
            )
        except Exception:
            logger.exception("Reward calculation failed; using fallback rewards")
            return self.fallback(player_level)

    def grant(
        self,
        player: BattleCreature,
        opponent: BattleCreature,
        is_pvp: bool = False,
        opponent_gems: int = 0,
    ) -> RewardGrant:
        """Compute rewards and apply them to the player's card."""
        rewards = self.compute(player, opponent, is_pvp, opponent_gems)

        messages = [f"Gained {rewards.experience_gained} experience points!"]
        if rewards.gems_earned > 0:
            messages.append(f"Earned {rewards.gems_earned} gems!")
        if rewards.gems_stolen > 0:
            messages.append(f"Stole {rewards.gems_stolen} gems!")
        if rewards.level_up and rewards.stat_increases is not None:
            messages.append(
                f"{player.name} leveled up to level {rewards.stat_increases.new_level}!"
            )

        card = apply_progression(player.card, rewards.experience_gained, rewards.stat_increases)
        return RewardGrant(rewards=rewards, card=card, messages=tuple(messages))

    def persist(
        self,
        card: Card,
        rewards: PostBattleRewards,
        user_id: str = "default",
    ) -> PersistResult:
        """
        Write rewards to the persistence gateway.

        ``card`` is the card as it was before rewards were applied; the
        gateway returns the updated record.
        """
        if self.persistence is None or not rewards.has_rewards:
            return PersistResult()

        messages: list[str] = []
        saved_card: Optional[Card] = None
        total: Optional[int] = None
        failures: list[Exception] = []

        if rewards.experience_gained > 0:
            try:
                saved_card = self.persistence.save_progression(
                    card, rewards.experience_gained, rewards.stat_increases,
                )
                messages.append(f"{card.name} gained {rewards.experience_gained} experience!")
                if rewards.stat_increases is not None:
                    messages.append(f"{card.name} leveled up! Stats increased!")
            except Exception as e:
                logger.warning("Failed to save progression for %s: %s", card, e)
                failures.append(e)

        if rewards.gems_earned > 0 or rewards.gems_stolen > 0:
            try:
                total = self.persistence.add_currency(
                    user_id, rewards.gems_earned, rewards.gems_stolen,
                )
                if rewards.gems_earned > 0:
                    messages.append(f"Earned {rewards.gems_earned} gems from victory!")
                if rewards.gems_stolen > 0:
                    messages.append(f"Stole {rewards.gems_stolen} gems from opponent!")
                messages.append(f"Total gems: {total}")
            except Exception as e:
                logger.warning("Failed to save gems for %s: %s", user_id, e)
                failures.append(e)

        network = any(is_network_error(e) for e in failures)
        if failures:
            messages.append(NETWORK_FAILURE_MESSAGE if network else SAVE_FAILURE_MESSAGE)

        return PersistResult(
            card=saved_card,
            total_gems=total,
            messages=tuple(messages),
            failed=bool(failures),
            network_error=network,
        )

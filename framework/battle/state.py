"""
Battle state - the single aggregate owned by the battle system.

BattleState is immutable: every transition builds a new value, so a
snapshot handed to the presentation layer never changes underneath it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from framework.battle.actor import BattleCreature
from framework.progression.experience import StatIncreases


class BattlePhase(Enum):
    """Coarse state of a single battle instance."""
    SELECTION = "selection"
    BATTLE = "battle"
    RESULTS = "results"


class Turn(Enum):
    """Side whose move is being resolved."""
    PLAYER = "player"
    OPPONENT = "opponent"

    @property
    def other(self) -> Turn:
        return Turn.OPPONENT if self is Turn.PLAYER else Turn.PLAYER


@dataclass(frozen=True)
class LastMove:
    """The most recently resolved move."""
    move_name: str
    damage: int
    target: Turn


@dataclass(frozen=True)
class PostBattleRewards:
    """Rewards for a won battle. Created once, never recomputed."""
    experience_gained: int
    gems_earned: int
    gems_stolen: int
    level_up: bool
    stat_increases: Optional[StatIncreases] = None

    @property
    def has_rewards(self) -> bool:
        return self.experience_gained > 0 or self.gems_earned > 0 or self.gems_stolen > 0


@dataclass(frozen=True)
class BattleState:
    """
    Canonical battle state.

    Attributes:
        player_creature: The player's creature, once selected
        opponent_creature: The opponent's creature, once selected
        battle_log: User-facing log, append-only within one battle
        current_turn: Whose move is being resolved
        battle_active: True while moves can still be resolved
        battle_phase: SELECTION, BATTLE or RESULTS
        winner: Set exactly when battle_phase is RESULTS
        is_opponent_thinking: True while an opponent move is scheduled
        last_move: Most recently resolved move
        post_battle_rewards: Rewards for a won battle
        celebration_active: Victory celebration cue for the presentation layer
        actions_enabled: Action gate; blocks player input during resets
        battle_id: Battle instance id, bumped by every reset
    """
    player_creature: Optional[BattleCreature] = None
    opponent_creature: Optional[BattleCreature] = None
    battle_log: tuple[str, ...] = ()
    current_turn: Turn = Turn.PLAYER
    battle_active: bool = False
    battle_phase: BattlePhase = BattlePhase.SELECTION
    winner: Optional[Turn] = None
    is_opponent_thinking: bool = False
    last_move: Optional[LastMove] = None
    post_battle_rewards: Optional[PostBattleRewards] = None
    celebration_active: bool = False
    actions_enabled: bool = True
    battle_id: int = 0

    def with_log(self, *messages: str) -> BattleState:
        """Return a copy with ``messages`` appended to the log."""
        return replace(self, battle_log=self.battle_log + tuple(messages))

    def can_player_move(self) -> bool:
        """Whether the presentation layer may offer move selection."""
        return (
            self.battle_active
            and self.current_turn is Turn.PLAYER
            and not self.is_opponent_thinking
            and self.battle_phase is BattlePhase.BATTLE
            and self.actions_enabled
        )

    def is_battle_complete(self) -> bool:
        return self.battle_phase is BattlePhase.RESULTS and self.winner is not None

    def invariant_violations(self) -> list[str]:
        """List broken invariants (empty for a consistent state)."""
        problems = []

        for label, creature in (("player", self.player_creature),
                                ("opponent", self.opponent_creature)):
            if creature is not None and not 0 <= creature.current_hp <= creature.max_hp:
                problems.append(f"{label} HP out of range")

        if (self.battle_phase is BattlePhase.RESULTS) != (self.winner is not None):
            problems.append("winner and RESULTS phase disagree")

        if self.is_opponent_thinking and self.current_turn is not Turn.OPPONENT:
            problems.append("opponent thinking outside its turn")

        if self.post_battle_rewards is not None and self.winner is not Turn.PLAYER:
            problems.append("rewards without a player victory")

        return problems


INITIAL_BATTLE_STATE = BattleState()

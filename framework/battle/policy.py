"""
Opponent policies - how the AI chooses its move.

A policy only picks a move. Scheduling and damage are handled by the
battle system, so policies can be swapped freely.
"""

from __future__ import annotations

import random
from typing import Optional, Protocol, Sequence

from framework.battle.actor import DEFAULT_BATTLE_PROFILE
from framework.components.card import BattleMove


class OpponentPolicy(Protocol):
    """Chooses a move from a creature's move list."""

    def select_move(self, moves: Sequence[BattleMove]) -> BattleMove: ...


def _usable(moves: Sequence[BattleMove]) -> Sequence[BattleMove]:
    return moves if moves else DEFAULT_BATTLE_PROFILE.moves


class RandomMovePolicy:
    """Uniformly random move choice."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def select_move(self, moves: Sequence[BattleMove]) -> BattleMove:
        return self.rng.choice(list(_usable(moves)))


class StrongestMovePolicy:
    """Always uses the highest-power move (first one on ties)."""

    def select_move(self, moves: Sequence[BattleMove]) -> BattleMove:
        return max(_usable(moves), key=lambda m: m.power)

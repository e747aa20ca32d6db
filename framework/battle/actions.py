"""
Battle actions - damage calculation and move resolution.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, replace
from typing import Optional

from framework.battle.actor import BattleCreature
from framework.battle.state import BattlePhase, BattleState, LastMove, Turn
from framework.components.card import BattleMove, CardStats

RANDOM_FACTOR_MIN = 0.85
RANDOM_FACTOR_SPAN = 0.15


@dataclass(frozen=True)
class DamageCalculation:
    """Breakdown of a single damage roll."""
    base_damage: int
    random_factor: float
    final_damage: int


@dataclass(frozen=True)
class MoveOutcome:
    """Result of resolving one move."""
    attacker: Turn
    move: BattleMove
    damage: DamageCalculation
    defender_fainted: bool


class TurnResolver:
    """
    Executes moves against the battle state.

    Resolution methods never mutate anything: they return the next state,
    or None when the move is not allowed in the given state.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def calculate_damage(
        self,
        attacker: CardStats,
        defender: CardStats,
        move: BattleMove,
    ) -> DamageCalculation:
        """
        Roll damage for a move.

        base = floor(attack * power / (defense * 2)), scaled by a uniform
        factor in [0.85, 1.0), never below 1. Zero defense counts as 1.
        """
        defense = max(1, defender.defense)
        base_damage = math.floor((attacker.attack * move.power) / (defense * 2))

        random_factor = RANDOM_FACTOR_MIN + self.rng.random() * RANDOM_FACTOR_SPAN
        final_damage = max(1, math.floor(base_damage * random_factor))

        return DamageCalculation(
            base_damage=base_damage,
            random_factor=random_factor,
            final_damage=final_damage,
        )

    def execute_player_move(
        self,
        state: BattleState,
        move: BattleMove,
    ) -> Optional[tuple[BattleState, MoveOutcome]]:
        """
        Resolve the player's move.

        Valid only on the player's turn of an active battle. A knock-out
        ends the battle with the player as winner; otherwise the turn
        passes to the opponent.
        """
        if (state.player_creature is None or state.opponent_creature is None
                or state.current_turn is not Turn.PLAYER or not state.battle_active):
            return None

        return self._resolve(state, Turn.PLAYER, move)

    def execute_opponent_move(
        self,
        state: BattleState,
        move: BattleMove,
    ) -> Optional[tuple[BattleState, MoveOutcome]]:
        """
        Resolve the opponent's move.

        Valid only on the opponent's turn of an active battle. Clears the
        thinking flag and hands the turn back unless the player fainted.
        """
        if (state.player_creature is None or state.opponent_creature is None
                or state.current_turn is not Turn.OPPONENT or not state.battle_active):
            return None

        return self._resolve(state, Turn.OPPONENT, move)

    def _resolve(
        self,
        state: BattleState,
        attacker_side: Turn,
        move: BattleMove,
    ) -> tuple[BattleState, MoveOutcome]:
        attacker, defender = self._sides(state, attacker_side)

        damage = self.calculate_damage(attacker.stats, defender.stats, move)
        defender = defender.take_damage(damage.final_damage)
        fainted = defender.is_fainted

        messages = [
            f"{attacker.name} used {move.name}!",
            f"Dealt {damage.final_damage} damage!",
        ]

        if fainted:
            messages.append(f"{defender.name} fainted!")
            messages.append(
                "You won the battle!" if attacker_side is Turn.PLAYER else "You lost the battle!"
            )
        elif attacker_side is Turn.OPPONENT:
            messages.append("Choose your next move!")

        if attacker_side is Turn.PLAYER:
            next_state = replace(state, opponent_creature=defender)
        else:
            next_state = replace(state, player_creature=defender)

        next_state = replace(
            next_state,
            current_turn=attacker_side if fainted else attacker_side.other,
            battle_active=not fainted,
            battle_phase=BattlePhase.RESULTS if fainted else BattlePhase.BATTLE,
            winner=attacker_side if fainted else None,
            is_opponent_thinking=False,
            last_move=LastMove(
                move_name=move.name,
                damage=damage.final_damage,
                target=attacker_side.other,
            ),
        ).with_log(*messages)

        outcome = MoveOutcome(
            attacker=attacker_side,
            move=move,
            damage=damage,
            defender_fainted=fainted,
        )
        return next_state, outcome

    @staticmethod
    def _sides(state: BattleState, attacker_side: Turn) -> tuple[BattleCreature, BattleCreature]:
        if attacker_side is Turn.PLAYER:
            return state.player_creature, state.opponent_creature
        return state.opponent_creature, state.player_creature

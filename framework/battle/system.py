"""
Battle system - owner of the battle state.

All gameplay transitions go through BattleSystem. Deferred work (AI
think time, celebration, reset grace period, reward persistence) is
scheduled on a TaskRegistry driven by update(dt), and every deferred
callback re-reads the current state when it fires.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Iterable, Optional

from engine.core.events import BattleEvent, EventBus
from engine.core.tasks import TaskHandle, TaskRegistry
from framework.battle.actions import MoveOutcome, TurnResolver
from framework.battle.actor import battle_moves, create_battle_creature
from framework.battle.config import BattleConfig
from framework.battle.policy import OpponentPolicy, RandomMovePolicy
from framework.battle.rewards import RewardOrchestrator
from framework.battle.state import (
    INITIAL_BATTLE_STATE,
    BattlePhase,
    BattleState,
    PostBattleRewards,
    Turn,
)
from framework.components.card import BattleMove, Card
from framework.progression.experience import ProgressionCalculator

logger = logging.getLogger(__name__)


class BattleSystem:
    """
    Turn-based battle state machine.

    Invalid transitions are ignored and reported through return values;
    nothing here raises into the presentation layer.

    Usage:
        battle = BattleSystem(BattleConfig(), events=bus)
        battle.select_player_creature(card)
        battle.select_opponent_creature(database.ready_cards(), card.id)
        battle.start_battle()
        battle.execute_player_move(battle.get_player_moves()[0])

        # Each frame
        battle.update(dt)
    """

    def __init__(
        self,
        config: Optional[BattleConfig] = None,
        events: Optional[EventBus] = None,
        tasks: Optional[TaskRegistry] = None,
        rng: Optional[random.Random] = None,
        policy: Optional[OpponentPolicy] = None,
        resolver: Optional[TurnResolver] = None,
        rewards: Optional[RewardOrchestrator] = None,
    ):
        self.config = config or BattleConfig()
        self.events = events
        self.tasks = tasks or TaskRegistry()
        self.rng = rng or random.Random()
        self.policy = policy or RandomMovePolicy(self.rng)
        self.resolver = resolver or TurnResolver(self.rng)
        self.rewards = rewards or RewardOrchestrator(progression=ProgressionCalculator(self.rng))

        self._state: BattleState = INITIAL_BATTLE_STATE
        self._pending_persist: Optional[tuple[TaskHandle, Card, PostBattleRewards]] = None

    @property
    def state(self) -> BattleState:
        """Current immutable state snapshot."""
        return self._state

    def _commit(self, state: BattleState) -> None:
        if state == self._state:
            return
        self._state = state
        self._publish(BattleEvent.STATE_CHANGED, state=state)

    def _publish(self, event_type: BattleEvent, **data) -> None:
        if self.events is not None:
            self.events.publish(event_type, **data)

    # Selection

    def select_player_creature(self, card: Card) -> bool:
        """Select the player's creature at full HP."""
        state = self._state
        if state.battle_phase is not BattlePhase.SELECTION or not state.actions_enabled:
            return False

        creature = create_battle_creature(card)
        self._commit(
            replace(state, player_creature=creature)
            .with_log(f"{creature.name} is ready for battle!")
        )
        return True

    def select_opponent_creature(
        self,
        candidates: Iterable[Card],
        exclude_id: Optional[str] = None,
    ) -> bool:
        """
        Pick a random opponent among ready candidates.

        Returns False (and logs a message) when no candidate qualifies.
        """
        state = self._state
        if state.battle_phase is not BattlePhase.SELECTION or not state.actions_enabled:
            return False

        eligible = [
            card for card in candidates
            if card.is_ready and card.id != exclude_id
        ]
        if not eligible:
            self._commit(state.with_log("No opponents available for battle!"))
            return False

        creature = create_battle_creature(self.rng.choice(eligible))
        self._commit(
            replace(state, opponent_creature=creature)
            .with_log(f"Wild {creature.name} appeared!")
        )
        return True

    def start_battle(self) -> bool:
        """Enter the battle phase with the player moving first."""
        state = self._state
        if (state.player_creature is None or state.opponent_creature is None
                or state.battle_phase is not BattlePhase.SELECTION
                or not state.actions_enabled):
            return False

        self._commit(
            replace(
                state,
                battle_phase=BattlePhase.BATTLE,
                current_turn=Turn.PLAYER,
                battle_active=True,
                winner=None,
            ).with_log("Battle begins!", "Choose your move!")
        )
        self._publish(
            BattleEvent.BATTLE_STARTED,
            player=state.player_creature,
            opponent=state.opponent_creature,
        )
        return True

    # Moves

    def execute_player_move(self, move: BattleMove) -> bool:
        """
        Resolve the player's move.

        A knock-out ends the battle and grants rewards in the same
        transition. Otherwise the opponent turn begins.
        """
        state = self._state
        if not state.actions_enabled or state.is_opponent_thinking:
            return False

        resolved = self.resolver.execute_player_move(state, move)
        if resolved is None:
            return False
        next_state, outcome = resolved

        if outcome.defender_fainted:
            next_state = self._grant_rewards(next_state)
        elif self.config.auto_opponent_turn:
            next_state = self._begin_opponent_turn(next_state)

        self._commit(next_state)
        self._after_move(outcome, next_state)
        return True

    def execute_opponent_move(self) -> bool:
        """
        Begin the opponent turn.

        The move itself resolves after ai_think_delay. Ignored unless it
        is the opponent's turn and no opponent move is already pending.
        """
        state = self._state
        if (state.player_creature is None or state.opponent_creature is None
                or state.current_turn is not Turn.OPPONENT
                or not state.battle_active
                or state.is_opponent_thinking):
            return False

        self._commit(self._begin_opponent_turn(state))
        return True

    def _begin_opponent_turn(self, state: BattleState) -> BattleState:
        battle_id = state.battle_id
        self.tasks.schedule(
            self.config.ai_think_delay,
            lambda: self._resolve_opponent_turn(battle_id),
            name="opponent_move",
        )
        return replace(state, is_opponent_thinking=True)

    def _resolve_opponent_turn(self, battle_id: int) -> None:
        state = self._state
        if state.battle_id != battle_id or state.opponent_creature is None:
            logger.debug("Dropping opponent move for stale battle %d", battle_id)
            return

        move = self.policy.select_move(state.opponent_creature.moves)
        resolved = self.resolver.execute_opponent_move(state, move)
        if resolved is None:
            return
        next_state, outcome = resolved

        self._commit(next_state)
        self._after_move(outcome, next_state)

    def _after_move(self, outcome: MoveOutcome, state: BattleState) -> None:
        # ``state`` is the committed result; handlers may already have moved past it
        self._publish(BattleEvent.MOVE_RESOLVED, outcome=outcome)
        if outcome.defender_fainted:
            self._publish(
                BattleEvent.BATTLE_ENDED,
                winner=state.winner,
                rewards=state.post_battle_rewards,
            )
            logger.info("Battle %d ended, winner: %s", state.battle_id, state.winner.value)
            if state.post_battle_rewards is not None:
                self._publish(BattleEvent.REWARDS_READY, rewards=state.post_battle_rewards)

    # Rewards

    def _grant_rewards(self, state: BattleState) -> BattleState:
        """Apply rewards to a won state and schedule the follow-up tasks."""
        player = state.player_creature
        grant = self.rewards.grant(
            player,
            state.opponent_creature,
            self.config.is_pvp,
            self.config.opponent_gems,
        )

        battle_id = state.battle_id
        if self.rewards.persistence is not None and grant.rewards.has_rewards:
            handle = self.tasks.schedule(
                self.config.reward_persist_delay,
                lambda: self._persist_rewards(battle_id),
                name="persist_rewards",
            )
            self._pending_persist = (handle, player.card, grant.rewards)

        self.tasks.schedule(
            self.config.celebration_delay,
            lambda: self._start_celebration(battle_id),
            name="celebration_start",
        )

        return replace(
            state,
            player_creature=player.with_card(grant.card),
            post_battle_rewards=grant.rewards,
        ).with_log(*grant.messages)

    def _persist_rewards(self, battle_id: int) -> None:
        pending = self._pending_persist
        self._pending_persist = None
        if pending is None:
            return
        _, card, rewards = pending

        result = self.rewards.persist(card, rewards, self.config.user_id)

        if result.failed:
            self._publish(
                BattleEvent.REWARDS_SAVE_FAILED,
                rewards=rewards,
                network_error=result.network_error,
            )
        else:
            self._publish(BattleEvent.REWARDS_SAVED, rewards=rewards, total_gems=result.total_gems)

        state = self._state
        if state.battle_id != battle_id:
            logger.info("Rewards saved after battle reset: %s", " ".join(result.messages))
            return

        next_state = state.with_log(*result.messages)
        if result.card is not None and state.player_creature is not None:
            next_state = replace(
                next_state,
                player_creature=state.player_creature.with_card(result.card),
            )
        self._commit(next_state)

    def _flush_pending_persist(self) -> None:
        if self._pending_persist is None:
            return
        handle = self._pending_persist[0]
        if self.tasks.cancel(handle):
            logger.debug("Flushing reward persistence before cleanup")
            self._persist_rewards(battle_id=-1)
        else:
            self._pending_persist = None

    # Celebration

    def _start_celebration(self, battle_id: int) -> None:
        state = self._state
        if state.battle_id != battle_id or state.winner is not Turn.PLAYER:
            return

        self._commit(replace(state, celebration_active=True))
        self._publish(BattleEvent.CELEBRATION_STARTED)
        self.tasks.schedule(
            self.config.celebration_duration,
            lambda: self._stop_celebration(battle_id),
            name="celebration_stop",
        )

    def _stop_celebration(self, battle_id: int) -> None:
        state = self._state
        if state.battle_id != battle_id or not state.celebration_active:
            return

        self._commit(replace(state, celebration_active=False))
        self._publish(BattleEvent.CELEBRATION_ENDED)

    # Resets

    def cleanup_battle_actions(self) -> None:
        """
        Cancel all pending battle tasks and disable player actions.

        Idempotent and silent: never writes to the battle log.
        """
        self._flush_pending_persist()
        cancelled = self.tasks.cancel_all()
        if cancelled:
            logger.debug("Cancelled %d pending battle tasks", cancelled)

        if self._state.actions_enabled:
            self._commit(replace(self._state, actions_enabled=False))

    def reset_battle(self) -> None:
        """Return to creature selection, re-enabling input after a grace period."""
        previous = self._state
        self.cleanup_battle_actions()

        summary = (
            "Battle completed! Returning to creature selection..."
            if previous.battle_phase is BattlePhase.RESULTS
            else "Battle reset! Returning to creature selection..."
        )
        battle_id = previous.battle_id + 1
        self._commit(
            replace(INITIAL_BATTLE_STATE, actions_enabled=False, battle_id=battle_id)
            .with_log(summary)
        )

        self.tasks.schedule(
            self.config.reset_grace_period,
            lambda: self._enable_actions(battle_id),
            name="reset_grace",
        )

    def _enable_actions(self, battle_id: int) -> None:
        state = self._state
        if state.battle_id != battle_id or state.actions_enabled:
            return
        self._commit(replace(state, actions_enabled=True))

    def reset_for_rematch(self) -> bool:
        """
        Restart the battle with the same creatures at full HP.

        Playable immediately; falls back to a full clear when either
        creature is missing.
        """
        previous = self._state
        self._flush_pending_persist()
        self.tasks.cancel_all()

        battle_id = previous.battle_id + 1
        if previous.player_creature is None or previous.opponent_creature is None:
            self._commit(replace(INITIAL_BATTLE_STATE, battle_id=battle_id))
            return False

        player = previous.player_creature.restored()
        opponent = previous.opponent_creature.restored()
        self._commit(
            replace(
                INITIAL_BATTLE_STATE,
                player_creature=player,
                opponent_creature=opponent,
                battle_phase=BattlePhase.BATTLE,
                battle_active=True,
                current_turn=Turn.PLAYER,
                battle_id=battle_id,
            ).with_log(
                f"{player.name} is ready for battle!",
                f"Wild {opponent.name} appeared!",
                "Both PokePets have been restored to full health!",
                "Ready for a rematch!",
            )
        )
        return True

    def clear_battle_state(self) -> None:
        """Immediately return to the initial state with input enabled."""
        previous = self._state
        self.cleanup_battle_actions()
        self._commit(replace(INITIAL_BATTLE_STATE, battle_id=previous.battle_id + 1))

    def add_log_message(self, message: str) -> None:
        self._commit(self._state.with_log(message))

    # Queries

    def get_player_moves(self) -> list[BattleMove]:
        """Moves available to the player's creature (empty before selection)."""
        creature = self._state.player_creature
        if creature is None:
            return []
        return battle_moves(creature.card)

    def can_player_move(self) -> bool:
        return self._state.can_player_move()

    def is_battle_complete(self) -> bool:
        return self._state.is_battle_complete()

    def describe_phase(self) -> str:
        """Short description of the current phase for status displays."""
        state = self._state

        if state.battle_phase is BattlePhase.SELECTION:
            if state.player_creature is None:
                return "Select your PokePet for battle"
            if state.opponent_creature is None:
                return "Finding an opponent..."
            return "Ready to battle!"

        if state.battle_phase is BattlePhase.BATTLE:
            if state.is_opponent_thinking:
                return "Opponent is thinking..."
            if state.current_turn is Turn.PLAYER:
                return "Choose your move!"
            return "Opponent's turn"

        if state.winner is Turn.PLAYER:
            return "Victory! You won the battle!"
        return "Defeat! Better luck next time!"

    # Lifecycle

    def update(self, dt: float) -> None:
        """Advance scheduled battle tasks by ``dt`` seconds."""
        self.tasks.update(dt)

    def shutdown(self) -> None:
        """Cancel all outstanding work."""
        self._pending_persist = None
        cancelled = self.tasks.cancel_all()
        logger.debug("Battle system shut down (%d tasks cancelled)", cancelled)

    def __enter__(self) -> BattleSystem:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

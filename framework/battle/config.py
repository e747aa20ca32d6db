"""
Battle configuration - timing constants and reward context.
"""

from __future__ import annotations


class BattleConfig:
    """Configuration for the battle engine. All delays are in seconds."""

    def __init__(
        self,
        ai_think_delay: float = 1.5,
        celebration_delay: float = 0.5,
        celebration_duration: float = 4.0,
        reset_grace_period: float = 1.0,
        reward_persist_delay: float = 1.0,
        auto_opponent_turn: bool = True,
        user_id: str = "default",
        is_pvp: bool = False,
        opponent_gems: int = 0,
    ):
        self.ai_think_delay = ai_think_delay
        self.celebration_delay = celebration_delay
        self.celebration_duration = celebration_duration
        self.reset_grace_period = reset_grace_period
        self.reward_persist_delay = reward_persist_delay

        # When False the host calls execute_opponent_move() itself
        self.auto_opponent_turn = auto_opponent_turn

        # Reward context
        self.user_id = user_id
        self.is_pvp = is_pvp
        self.opponent_gems = opponent_gems

"""
Battle module - turn-based creature combat.

Provides:
- Battle creatures and the default battle profile
- Damage calculation and move resolution
- Opponent move policies
- Reward granting and persistence
- The battle state machine
"""

from framework.battle.actor import (
    BattleCreature,
    BattleProfile,
    DEFAULT_BATTLE_PROFILE,
    battle_moves,
    battle_stats,
    create_battle_creature,
)
from framework.battle.actions import (
    DamageCalculation,
    MoveOutcome,
    TurnResolver,
)
from framework.battle.config import BattleConfig
from framework.battle.policy import (
    OpponentPolicy,
    RandomMovePolicy,
    StrongestMovePolicy,
)
from framework.battle.rewards import (
    PersistResult,
    RewardGrant,
    RewardOrchestrator,
)
from framework.battle.state import (
    INITIAL_BATTLE_STATE,
    BattlePhase,
    BattleState,
    LastMove,
    PostBattleRewards,
    Turn,
)
from framework.battle.system import BattleSystem

__all__ = [
    # Actor
    "BattleCreature",
    "BattleProfile",
    "DEFAULT_BATTLE_PROFILE",
    "battle_moves",
    "battle_stats",
    "create_battle_creature",
    # Actions
    "DamageCalculation",
    "MoveOutcome",
    "TurnResolver",
    # Config
    "BattleConfig",
    # Policy
    "OpponentPolicy",
    "RandomMovePolicy",
    "StrongestMovePolicy",
    # Rewards
    "PersistResult",
    "RewardGrant",
    "RewardOrchestrator",
    # State
    "INITIAL_BATTLE_STATE",
    "BattlePhase",
    "BattleState",
    "LastMove",
    "PostBattleRewards",
    "Turn",
    # System
    "BattleSystem",
]

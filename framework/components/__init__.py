"""
Battle Components - Data-only component definitions.

All components are Pydantic models containing only data.
Logic lives in the battle system, not in components.
"""

from framework.components.card import (
    BattleMove,
    Card,
    CardStats,
    CardStatus,
)

__all__ = [
    "BattleMove",
    "Card",
    "CardStats",
    "CardStatus",
]

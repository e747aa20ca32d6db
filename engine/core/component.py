"""
Component base class for data-only records.

Components are pure data containers with NO battle logic.
All logic lives in the battle and progression systems. This keeps
cards trivially serializable and battle state snapshots cheap to copy.

Usage:
    class CardStats(Component):
        attack: int = 50
        defense: int = 50
        hp: int = 100
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all components.

    Components are data-only containers using Pydantic for:
    - Automatic validation
    - JSON serialization
    - Type hints
    - Default values

    Updates should go through ``model_copy(update=...)`` so snapshots
    handed out by the battle system are never changed underneath a reader.
    """

    model_config = ConfigDict(
        # Validate on assignment
        validate_assignment=True,
        # Card records coming from the gallery carry fields we do not model
        extra='ignore',
        use_enum_values=False,
    )

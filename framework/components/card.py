"""
Card components - creature cards, stats and moves.

A Card is the durable record of a creature owned by a player. Battles
never change it directly; they work on a BattleCreature built from it.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field

from engine.core.component import Component


class CardStatus(Enum):
    """Generation status of a card in the gallery."""
    QUEUED = "queued"
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


class CardStats(Component):
    """
    Battle statistics for a creature.

    Attributes:
        attack: Offensive power, scales outgoing damage
        defense: Resistance, divides incoming damage
        speed: Reserved for turn order variants
        hp: Maximum hit points in battle
    """
    attack: int = Field(default=50, ge=0)
    defense: int = Field(default=50, ge=0)
    speed: int = Field(default=50, ge=0)
    hp: int = Field(default=100, ge=0)


class BattleMove(Component):
    """A move a creature can use. Immutable once created."""
    name: str
    power: int = Field(ge=0)
    type: str = "normal"

    model_config = ConfigDict(frozen=True)


class Card(Component):
    """
    A creature card as stored in the gallery.

    Attributes:
        id: Card identifier
        name: Display name
        status: Generation status (only READY cards can battle)
        xp: Lifetime experience points
        stats: Battle stats (None for cards generated before stats existed)
        moves: Move list (None falls back to the default move set)
    """
    id: str
    name: str
    status: CardStatus = CardStatus.READY
    element: str = "normal"
    rarity: str = "common"
    xp: int = Field(default=0, ge=0)
    stats: Optional[CardStats] = None
    moves: Optional[list[BattleMove]] = None

    @property
    def is_ready(self) -> bool:
        """Check if the card can be used in battle."""
        return self.status == CardStatus.READY

    def __str__(self) -> str:
        return f"{self.name} (#{self.id})"

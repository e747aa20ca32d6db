"""
Battle actors - creatures taking part in a battle.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from framework.components.card import BattleMove, Card, CardStats


@dataclass(frozen=True)
class BattleProfile:
    """Stats and moves used when a card does not define its own."""
    stats: CardStats
    moves: tuple[BattleMove, ...]


DEFAULT_BATTLE_PROFILE = BattleProfile(
    stats=CardStats(attack=50, defense=50, speed=50, hp=100),
    moves=(
        BattleMove(name="Tackle", power=40, type="normal"),
        BattleMove(name="Scratch", power=35, type="normal"),
        BattleMove(name="Quick Attack", power=30, type="normal"),
    ),
)


def battle_stats(card: Card) -> CardStats:
    """Get a card's battle stats, falling back to the default profile."""
    return card.stats if card.stats is not None else DEFAULT_BATTLE_PROFILE.stats


def battle_moves(card: Card) -> list[BattleMove]:
    """Get a card's moves, falling back to the default move set."""
    if card.moves:
        return list(card.moves)
    return list(DEFAULT_BATTLE_PROFILE.moves)


@dataclass(frozen=True)
class BattleCreature:
    """
    A creature in battle.

    HP lives here and not on the card: the card is only changed when
    rewards are applied at the end of a won battle.
    """
    card: Card
    current_hp: int
    max_hp: int

    def __post_init__(self) -> None:
        if self.max_hp < 0:
            raise ValueError(f"max_hp must be >= 0, got {self.max_hp}")
        if not 0 <= self.current_hp <= self.max_hp:
            raise ValueError(
                f"current_hp {self.current_hp} outside [0, {self.max_hp}]"
            )

    @property
    def name(self) -> str:
        return self.card.name

    @property
    def stats(self) -> CardStats:
        return battle_stats(self.card)

    @property
    def moves(self) -> list[BattleMove]:
        return battle_moves(self.card)

    @property
    def is_fainted(self) -> bool:
        return self.current_hp == 0

    @property
    def hp_percent(self) -> float:
        """Get HP as percentage (0-1)."""
        if self.max_hp <= 0:
            return 0.0
        return self.current_hp / self.max_hp

    def take_damage(self, amount: int) -> BattleCreature:
        """Return a copy with ``amount`` damage applied, clamped at 0."""
        return replace(self, current_hp=max(0, self.current_hp - max(0, amount)))

    def restored(self) -> BattleCreature:
        """Return a copy at full HP."""
        return replace(self, current_hp=self.max_hp)

    def with_card(self, card: Card) -> BattleCreature:
        """Return a copy holding an updated card record (HP unchanged)."""
        return replace(self, card=card)


def create_battle_creature(card: Card) -> BattleCreature:
    """Create a full-HP BattleCreature from a card."""
    max_hp = battle_stats(card).hp or DEFAULT_BATTLE_PROFILE.stats.hp
    return BattleCreature(card=card, current_hp=max_hp, max_hp=max_hp)

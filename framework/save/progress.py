"""
Progress persistence - creature progression and gem wallets.

Provides:
- PersistenceGateway protocol consumed by the reward orchestrator
- Error types that let callers tell network failures from other failures
- ProgressStore: JSON file implementation with checksum validation
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Protocol

from pydantic import ValidationError

from framework.components.card import Card
from framework.progression.experience import StatIncreases

logger = logging.getLogger(__name__)

STARTING_GEMS = 50


class PersistenceError(Exception):
    """A durable write or read failed."""


class NetworkError(PersistenceError):
    """The storage backend could not be reached."""


_NETWORK_HINTS = ("network", "fetch", "timeout")


def is_network_error(error: BaseException) -> bool:
    """Classify a persistence failure as network-related."""
    if isinstance(error, (NetworkError, ConnectionError, TimeoutError)):
        return True
    message = str(error).lower()
    return any(hint in message for hint in _NETWORK_HINTS)


class PersistenceGateway(Protocol):
    """Durable storage for creature progression and currency."""

    def save_progression(
        self,
        card: Card,
        xp_gained: int,
        stat_increases: Optional[StatIncreases],
    ) -> Card:
        """Apply experience (and stat growth) to a card, store it, return it."""
        ...

    def add_currency(self, user_id: str, earned: int, stolen: int) -> int:
        """Add gems to a wallet and return the new total."""
        ...


def apply_progression(
    card: Card,
    xp_gained: int,
    stat_increases: Optional[StatIncreases],
) -> Card:
    """
    Return a copy of ``card`` with experience and stat growth applied.

    Speed never grows. Cards without stats only gain experience.
    """
    update: dict[str, Any] = {"xp": card.xp + xp_gained}

    if stat_increases is not None and card.stats is not None:
        update["stats"] = card.stats.model_copy(update={
            "attack": card.stats.attack + stat_increases.attack,
            "defense": card.stats.defense + stat_increases.defense,
            "hp": card.stats.hp + stat_increases.hp,
        })

    return card.model_copy(update=update)


_SAFE_NAME = re.compile(r"[^A-Za-z0-9_.-]")


class ProgressStore:
    """
    JSON file store for card progression and gem wallets.

    Layout under ``save_path``:
        cards/<card id>.json
        wallets/<user id>.json

    Every file carries a checksum; a mismatch is reported as a
    PersistenceError instead of silently trusting tampered data.

    Usage:
        store = ProgressStore("game/saves/progress")
        card = store.save_progression(card, 40, None)
        total = store.add_currency("default", 12, 0)
    """

    def __init__(self, save_path: str | Path = "game/saves/progress"):
        self.save_path = Path(save_path)
        (self.save_path / "cards").mkdir(parents=True, exist_ok=True)
        (self.save_path / "wallets").mkdir(parents=True, exist_ok=True)

    def _card_path(self, card_id: str) -> Path:
        return self.save_path / "cards" / f"{_SAFE_NAME.sub('_', card_id)}.json"

    def _wallet_path(self, user_id: str) -> Path:
        return self.save_path / "wallets" / f"{_SAFE_NAME.sub('_', user_id)}.json"

    # Gateway

    def save_progression(
        self,
        card: Card,
        xp_gained: int,
        stat_increases: Optional[StatIncreases],
    ) -> Card:
        updated = apply_progression(card, xp_gained, stat_increases)
        self._write(self._card_path(card.id), {
            "card": updated.model_dump(mode="json"),
            "updated_at": _now(),
        })
        logger.info(
            "Saved progression for %s: +%d xp, level-up=%s",
            updated, xp_gained, stat_increases is not None,
        )
        return updated

    def add_currency(self, user_id: str, earned: int, stolen: int) -> int:
        current = self.get_currency(user_id)
        gained = max(0, earned) + max(0, stolen)
        new_total = current + gained

        self._write(self._wallet_path(user_id), {
            "user_id": user_id,
            "total_gems": new_total,
            "gems_earned": gained,
            "updated_at": _now(),
        })
        logger.info(
            "Gems updated for %s: %d -> %d (earned %d, stolen %d)",
            user_id, current, new_total, earned, stolen,
        )
        return new_total

    # Queries

    def get_currency(self, user_id: str) -> int:
        """Current gem total; new users start with STARTING_GEMS."""
        data = self._read(self._wallet_path(user_id))
        if data is None:
            return STARTING_GEMS
        return int(data.get("total_gems", STARTING_GEMS))

    def load_card(self, card_id: str) -> Optional[Card]:
        """Load the last saved version of a card."""
        data = self._read(self._card_path(card_id))
        if data is None:
            return None
        try:
            return Card.model_validate(data["card"])
        except (KeyError, ValidationError) as e:
            raise PersistenceError(f"Corrupted card save for {card_id}: {e}") from e

    # File helpers

    def _write(self, path: Path, data: dict) -> None:
        payload = dict(data)
        payload['checksum'] = self._calculate_checksum(data)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2)
        except OSError as e:
            raise PersistenceError(f"Failed to write {path.name}: {e}") from e

    def _read(self, path: Path) -> Optional[dict]:
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to read {path.name}: {e}") from e

        checksum = data.pop('checksum', None)
        if checksum is not None and checksum != self._calculate_checksum(data):
            raise PersistenceError(f"Checksum mismatch in {path.name}")
        return data

    def _calculate_checksum(self, data: dict) -> str:
        """Calculate checksum for save data."""
        json_str = json.dumps(data, sort_keys=True, separators=(',', ':'))
        hash_bytes = hashlib.sha256(json_str.encode('utf-8')).digest()
        return base64.b64encode(hash_bytes).decode('ascii')


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

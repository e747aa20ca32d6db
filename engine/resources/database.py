"""
Card Database.

Handles loading and validation of creature card records used as
battle participants and opponent candidates.
"""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema
from pydantic import ValidationError

from framework.components.card import Card

# Used when the data directory ships no card.schema.json of its own
CARD_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id", "name"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string", "minLength": 1},
        "status": {"enum": ["queued", "processing", "ready", "failed"]},
        "xp": {"type": "integer", "minimum": 0},
        "stats": {
            "type": "object",
            "properties": {
                "attack": {"type": "integer", "minimum": 0},
                "defense": {"type": "integer", "minimum": 0},
                "speed": {"type": "integer", "minimum": 0},
                "hp": {"type": "integer", "minimum": 0},
            },
        },
        "moves": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "power"],
                "properties": {
                    "name": {"type": "string"},
                    "power": {"type": "integer", "minimum": 0},
                    "type": {"type": "string"},
                },
            },
        },
    },
}


class CardDatabase:
    """
    Central storage for creature cards.

    Layout under ``data_path``:
        schemas/card.schema.json   (optional, overrides CARD_SCHEMA)
        cards/*.json               (one card or a list of cards per file)
    """

    def __init__(self, data_path: Path | str):
        self._data_path = Path(data_path)
        self._schema: dict[str, Any] = CARD_SCHEMA

        self.cards: dict[str, Card] = {}

        self.logger = logging.getLogger(__name__)

    def load_all(self) -> None:
        """Load all cards from disk."""
        self._load_schema()
        self.cards = self._load_cards()
        self.logger.info(f"Loaded {len(self.cards)} cards.")

    def _load_schema(self) -> None:
        """Load the card schema override if one exists."""
        schema_file = self._data_path / "schemas" / "card.schema.json"
        if not schema_file.exists():
            return

        try:
            with open(schema_file, 'r', encoding='utf-8') as f:
                self._schema = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.error(f"Failed to load schema {schema_file}: {e}")

    def _load_cards(self) -> dict[str, Card]:
        """Load all JSON files in the cards folder."""
        card_dir = self._data_path / "cards"
        data_store: dict[str, Card] = {}

        if not card_dir.exists():
            self.logger.warning(f"Card directory not found: {card_dir}")
            return data_store

        for file_path in sorted(card_dir.glob("*.json")):
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load {file_path}: {e}")
                continue

            records = data if isinstance(data, list) else [data]
            for record in records:
                card = self._parse_record(record, file_path)
                if card is not None:
                    data_store[card.id] = card

        return data_store

    def _parse_record(self, record: Any, file_path: Path) -> Card | None:
        """Validate a raw record and build a Card, or None if invalid."""
        try:
            jsonschema.validate(instance=record, schema=self._schema)
            return Card.model_validate(record)
        except jsonschema.ValidationError as e:
            self.logger.error(f"Validation error in {file_path}: {e.message}")
        except ValidationError as e:
            self.logger.error(f"Invalid card in {file_path}: {e}")
        return None

    def add(self, card: Card) -> None:
        """Register a card that did not come from disk."""
        self.cards[card.id] = card

    def get_card(self, card_id: str) -> Card | None:
        return self.cards.get(card_id)

    def ready_cards(self) -> list[Card]:
        """Cards that finished generation and can battle."""
        return [card for card in self.cards.values() if card.is_ready]

"""Error taxonomy for the card lifecycle."""
from __future__ import annotations

from typing import Optional


class CardsError(Exception):
    """Base card error."""


class InvalidCardInput(CardsError):
    """Creation input rejected before anything was persisted."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class CardNotFound(CardsError):
    """Raised when a card is missing or inactive; the two cases are not distinguished."""

    def __init__(self, card_id: str) -> None:
        super().__init__("Card not found or inactive")
        self.card_id = card_id


class DuplicateCardId(CardsError):
    """An insert collided with an existing id; points at a broken id generator."""

    def __init__(self, card_id: str) -> None:
        super().__init__(f"card id {card_id} already exists")
        self.card_id = card_id

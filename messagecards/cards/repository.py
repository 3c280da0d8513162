"""Storage abstractions for message cards."""
from __future__ import annotations

import json
import logging
import re
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol

from messagecards.cards.errors import DuplicateCardId
from messagecards.cards.models import Card
from messagecards.config import runtime_config

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class CardRepository(Protocol):
    def insert(self, card: Card) -> Card:
        ...

    def find_active_by_id(self, card_id: str) -> Optional[Card]:
        ...


class InMemoryCardRepository:
    """Simple in-memory repository keyed by card id."""

    def __init__(self) -> None:
        self._items: Dict[str, Card] = {}
        self._lock = threading.Lock()

    def insert(self, card: Card) -> Card:
        with self._lock:
            if card.id in self._items:
                raise DuplicateCardId(card.id)
            self._items[card.id] = card
        return card

    def find_active_by_id(self, card_id: str) -> Optional[Card]:
        card = self._items.get(card_id)
        if card is None or not card.is_active:
            return None
        return card


class FilesystemCardRepository:
    """One JSON document per card; exclusive create detects duplicate ids on disk."""

    def __init__(self, root: Optional[str | Path] = None) -> None:
        self._root = Path(root) if root else runtime_config.get_cards_fs_dir()
        self._root.mkdir(parents=True, exist_ok=True)

    def _file_path(self, card_id: str) -> Optional[Path]:
        if not _SAFE_ID.match(card_id):
            return None
        return self._root / f"{card_id}.json"

    def insert(self, card: Card) -> Card:
        path = self._file_path(card.id)
        if path is None:
            raise ValueError(f"card id {card.id!r} is not storable")
        try:
            with path.open("x", encoding="utf-8") as fh:
                fh.write(card.model_dump_json())
        except FileExistsError as exc:
            raise DuplicateCardId(card.id) from exc
        return card

    def find_active_by_id(self, card_id: str) -> Optional[Card]:
        path = self._file_path(card_id)
        if path is None or not path.exists():
            return None
        with path.open("r", encoding="utf-8") as fh:
            card = Card.model_validate(json.load(fh))
        if not card.is_active:
            return None
        return card


class FirestoreCardRepository:
    """Firestore-backed repository."""

    def __init__(self, client: Optional[object] = None) -> None:  # pragma: no cover - optional dep
        try:
            from google.cloud import firestore  # type: ignore
        except Exception as exc:
            raise RuntimeError("google-cloud-firestore not installed") from exc

        project = runtime_config.get_firestore_project()
        if not project:
            raise RuntimeError("GCP project is required for Firestore card repo")
        self._client = client or firestore.Client(project=project)  # type: ignore[arg-type]
        self._collection = "cards"

    def _col(self):  # pragma: no cover - optional dep
        return self._client.collection(self._collection)

    def insert(self, card: Card) -> Card:  # pragma: no cover - optional dep
        from google.api_core.exceptions import AlreadyExists  # type: ignore

        try:
            self._col().document(card.id).create(card.model_dump())
        except AlreadyExists as exc:
            raise DuplicateCardId(card.id) from exc
        return card

    def find_active_by_id(self, card_id: str) -> Optional[Card]:  # pragma: no cover - optional dep
        snap = self._col().document(card_id).get()
        if not snap or not snap.exists:
            return None
        card = Card.model_validate(snap.to_dict() or {})
        return card if card.is_active else None


def card_repo_from_env() -> CardRepository:
    backend = runtime_config.get_cards_backend()
    if backend == "firestore":
        try:
            return FirestoreCardRepository()
        except Exception as exc:
            raise RuntimeError(f"CARDS_BACKEND=firestore failed to initialize: {exc}") from exc
    if backend == "filesystem":
        return FilesystemCardRepository()
    if backend != "memory":
        logger.warning("unknown CARDS_BACKEND=%s, using in-memory store", backend)
    return InMemoryCardRepository()

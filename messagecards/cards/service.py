"""Service layer for message cards: validation, id generation, active-only reads."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import uuid4

from messagecards.cards.errors import CardNotFound, InvalidCardInput
from messagecards.cards.models import (
    MESSAGE_MAX_LENGTH,
    SENDER_NAME_MAX_LENGTH,
    Card,
    CardCreate,
)
from messagecards.cards.repository import CardRepository, card_repo_from_env
from messagecards.common.identity import RequestContext

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _normalize_message(raw: str) -> str:
    raw = raw or ""
    # Length is checked on the submitted text, emptiness after trimming.
    if len(raw) > MESSAGE_MAX_LENGTH:
        raise InvalidCardInput(
            f"message must be at most {MESSAGE_MAX_LENGTH} characters", field="message"
        )
    message = raw.strip()
    if not message:
        raise InvalidCardInput("message must not be empty", field="message")
    return message


def _normalize_sender_name(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    sender = raw.strip()
    if len(sender) > SENDER_NAME_MAX_LENGTH:
        raise InvalidCardInput(
            f"senderName must be at most {SENDER_NAME_MAX_LENGTH} characters", field="senderName"
        )
    return sender or None


class CardService:
    def __init__(
        self,
        repo: Optional[CardRepository] = None,
        id_fn: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.repo = repo or card_repo_from_env()
        self._id_fn = id_fn or (lambda: uuid4().hex)
        self._clock = clock or _utc_now

    def create(self, payload: CardCreate, ctx: Optional[RequestContext] = None) -> Card:
        template_id = (payload.template_id or "").strip()
        if not template_id:
            raise InvalidCardInput("templateId must not be empty", field="templateId")
        message = _normalize_message(payload.message)
        sender_name = _normalize_sender_name(payload.sender_name)

        card = Card(
            id=self._id_fn(),
            template_id=template_id,
            message=message,
            sender_name=sender_name,
            user_id=ctx.user_id if ctx else None,
            is_active=True,
            created_at=self._clock(),
        )
        # DuplicateCardId propagates; never retried here.
        created = self.repo.insert(card)
        logger.info("card created id=%s template=%s", created.id, created.template_id)
        return created

    def get_by_id(self, card_id: str) -> Card:
        card = self.repo.find_active_by_id(card_id) if card_id else None
        if card is None:
            logger.info("card lookup miss id=%s", card_id)
            raise CardNotFound(card_id)
        return card


_default_service: Optional[CardService] = None


def get_card_service() -> CardService:
    global _default_service
    if _default_service is None:
        _default_service = CardService()
    return _default_service


def set_card_service(service: CardService) -> None:
    global _default_service
    _default_service = service

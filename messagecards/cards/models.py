"""Schemas for message cards."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MESSAGE_MAX_LENGTH = 200
SENDER_NAME_MAX_LENGTH = 100


def _now() -> datetime:
    return datetime.now(timezone.utc)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class Card(_CamelModel):
    id: str
    template_id: str
    message: str
    sender_name: Optional[str] = None
    user_id: Optional[str] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=_now)


class CardCreate(_CamelModel):
    template_id: str
    message: str
    sender_name: Optional[str] = None


class CardCreated(_CamelModel):
    id: str
    share_url: str

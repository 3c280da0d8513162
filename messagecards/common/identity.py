"""Request context for card routes.

Cards are created and read without an authenticated identity; the context
only carries an optional caller id supplied by an upstream session layer.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Header

from messagecards.config import runtime_config


@dataclass
class RequestContext:
    env: Optional[str] = None
    user_id: Optional[str] = None
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        if not self.request_id:
            raise ValueError("request_id is required")
        self.env = (self.env or runtime_config.get_env()).lower()
        if self.user_id is not None:
            self.user_id = self.user_id.strip() or None


async def get_request_context(
    header_user: Optional[str] = Header(default=None, alias="X-User-Id"),
    header_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> RequestContext:
    return RequestContext(
        user_id=header_user,
        request_id=header_request_id or uuid.uuid4().hex,
    )

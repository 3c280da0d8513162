from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

VIEW_STATE_NAMESPACE = "card_viewed"


class ViewStateResult(BaseModel):
    """Outcome of a local storage call; failures carry `error` instead of raising."""

    ok: bool
    value: bool = False
    error: Optional[str] = None

    @classmethod
    def success(cls, value: bool) -> "ViewStateResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "ViewStateResult":
        return cls(ok=False, error=error)

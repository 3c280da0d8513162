"""View-state tracker.

The only accessor for the per-device "reveal already shown" flag. Storage
failures never reach callers: reads degrade to "not yet viewed" and writes
are logged and dropped, so a broken store at worst replays the animation.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from messagecards.view_state.models import ViewStateResult
from messagecards.view_state.repository import FileViewStateRepository, ViewStateRepository

logger = logging.getLogger(__name__)


def _guarded(call: Callable[[str], ViewStateResult], card_id: str) -> ViewStateResult:
    try:
        return call(card_id)
    except Exception as exc:
        return ViewStateResult.failure(f"{type(exc).__name__}: {exc}")


class ViewStateTracker:
    def __init__(self, repo: Optional[ViewStateRepository] = None) -> None:
        self.repo = repo or FileViewStateRepository()

    def has_viewed(self, card_id: str) -> bool:
        result = _guarded(self.repo.read, card_id)
        if not result.ok:
            logger.warning("view state unavailable on read card=%s: %s", card_id, result.error)
            return False
        return result.value

    def mark_viewed(self, card_id: str) -> None:
        result = _guarded(self.repo.write, card_id)
        if not result.ok:
            logger.warning("view state unavailable on write card=%s: %s", card_id, result.error)

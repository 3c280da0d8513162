"""First-view reveal state machine.

IDLE -> LOADING -> READY_FIRST_VIEW -> ANIMATING -> SETTLED
                -> READY_REPEAT_VIEW -> SETTLED
IDLE/LOADING -> ERROR

The commit (mark viewed + footer) runs from one fixed 2000 ms timer, not from
the individual tracks finishing. Unmounting cancels that timer.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from messagecards.cards.errors import CardNotFound
from messagecards.cards.models import Card
from messagecards.cards.share import parse_share_url
from messagecards.reveal.fetchers import CardFetcher
from messagecards.reveal.scheduler import AsyncioScheduler, ScheduledTask, Scheduler
from messagecards.reveal.timeline import FINAL_PROPS, INITIAL_PROPS, AnimatedProps, RevealTimeline
from messagecards.templates.catalog import CardTemplate, get_template_by_id
from messagecards.view_state.service import ViewStateTracker

logger = logging.getLogger(__name__)

ERROR_TITLE = "カードが見つかりません"
ERROR_SUBTITLE = "URLが正しいか確認してください"
FOOTER_TEXT = "美容クリニックより"


class RevealState(str, Enum):
    idle = "idle"
    loading = "loading"
    ready_first_view = "ready_first_view"
    ready_repeat_view = "ready_repeat_view"
    animating = "animating"
    settled = "settled"
    error = "error"


class RevealErrorKind(str, Enum):
    missing_id = "missing_id"
    not_found = "not_found"
    fetch_failed = "fetch_failed"
    template_missing = "template_missing"


_ALLOWED = {
    RevealState.idle: {RevealState.loading, RevealState.error},
    RevealState.loading: {RevealState.ready_first_view, RevealState.ready_repeat_view, RevealState.error},
    RevealState.ready_first_view: {RevealState.animating},
    RevealState.ready_repeat_view: {RevealState.settled},
    RevealState.animating: {RevealState.settled},
    RevealState.settled: set(),
    RevealState.error: set(),
}

Listener = Callable[[RevealState, RevealState], None]


@dataclass(frozen=True)
class RevealView:
    state: RevealState
    card: Optional[Card]
    template: Optional[CardTemplate]
    props: AnimatedProps
    footer_visible: bool
    footer_text: Optional[str] = None
    error_kind: Optional[RevealErrorKind] = None
    error_title: Optional[str] = None
    error_subtitle: Optional[str] = None


class RevealOrchestrator:
    """Drives one mount of the card screen."""

    def __init__(
        self,
        card_id: Optional[str],
        fetcher: CardFetcher,
        tracker: ViewStateTracker,
        scheduler: Optional[Scheduler] = None,
        timeline: Optional[RevealTimeline] = None,
        template_lookup: Callable[[str], Optional[CardTemplate]] = get_template_by_id,
    ) -> None:
        self.card_id = (card_id or "").strip()
        self._fetcher = fetcher
        self._tracker = tracker
        self._scheduler = scheduler or AsyncioScheduler()
        self._timeline = timeline or RevealTimeline()
        self._template_lookup = template_lookup

        self.state = RevealState.idle
        self.card: Optional[Card] = None
        self.template: Optional[CardTemplate] = None
        self.error_kind: Optional[RevealErrorKind] = None
        self.footer_visible = False
        self.transitions: List[Tuple[RevealState, RevealState]] = []
        self.ready_at_ms: Optional[float] = None
        self.settled_at_ms: Optional[float] = None

        self._props = INITIAL_PROPS
        self._mounted = True
        self._animation_started_ms: Optional[float] = None
        self._commit_task: Optional[ScheduledTask] = None
        self._listeners: List[Listener] = []

    @classmethod
    def from_share_url(
        cls,
        url: str,
        fetcher: CardFetcher,
        tracker: ViewStateTracker,
        **kwargs,
    ) -> "RevealOrchestrator":
        return cls(parse_share_url(url), fetcher, tracker, **kwargs)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def elapsed_to_settle_ms(self) -> Optional[float]:
        if self.ready_at_ms is None or self.settled_at_ms is None:
            return None
        return self.settled_at_ms - self.ready_at_ms

    def _transition(self, new_state: RevealState) -> None:
        old_state = self.state
        if new_state not in _ALLOWED[old_state]:
            raise RuntimeError(f"illegal reveal transition {old_state.value} -> {new_state.value}")
        self.state = new_state
        self.transitions.append((old_state, new_state))
        logger.debug("reveal card=%s %s -> %s", self.card_id, old_state.value, new_state.value)
        for listener in list(self._listeners):
            listener(old_state, new_state)

    def _fail(self, kind: RevealErrorKind) -> None:
        self.error_kind = kind
        logger.info("reveal card=%s failed: %s", self.card_id, kind.value)
        self._transition(RevealState.error)

    async def _read_view_state(self) -> bool:
        return self._tracker.has_viewed(self.card_id)

    async def start(self) -> RevealState:
        if self.state is not RevealState.idle:
            raise RuntimeError("reveal already started")
        if not self.card_id:
            self._fail(RevealErrorKind.missing_id)
            return self.state

        self._transition(RevealState.loading)
        fetched, viewed = await asyncio.gather(
            self._fetcher.fetch(self.card_id),
            self._read_view_state(),
            return_exceptions=True,
        )
        if not self._mounted:
            return self.state

        if isinstance(fetched, CardNotFound):
            self._fail(RevealErrorKind.not_found)
            return self.state
        if isinstance(fetched, BaseException):
            logger.info("reveal card=%s fetch error: %s", self.card_id, fetched)
            self._fail(RevealErrorKind.fetch_failed)
            return self.state

        template = self._template_lookup(fetched.template_id)
        if template is None:
            self._fail(RevealErrorKind.template_missing)
            return self.state

        self.card = fetched
        self.template = template
        self.ready_at_ms = self._scheduler.now_ms()
        if viewed is True:
            self._transition(RevealState.ready_repeat_view)
            self._settle()
        else:
            self._transition(RevealState.ready_first_view)
            self._begin_animation()
        return self.state

    def _begin_animation(self) -> None:
        self._transition(RevealState.animating)
        self._animation_started_ms = self._scheduler.now_ms()
        self._commit_task = self._scheduler.call_later(self._timeline.duration_ms, self._on_commit_timer)

    def _on_commit_timer(self) -> None:
        self._commit_task = None
        if not self._mounted or self.state is not RevealState.animating:
            return
        self._tracker.mark_viewed(self.card_id)
        self._settle()

    def _settle(self) -> None:
        self._props = FINAL_PROPS
        self.footer_visible = True
        self.settled_at_ms = self._scheduler.now_ms()
        self._transition(RevealState.settled)

    def unmount(self) -> None:
        self._mounted = False
        if self._commit_task is not None:
            self._commit_task.cancel()
            self._commit_task = None

    def props(self, now_ms: Optional[float] = None) -> AnimatedProps:
        if self.state is RevealState.animating and self._animation_started_ms is not None:
            now = self._scheduler.now_ms() if now_ms is None else now_ms
            return self._timeline.sample(now - self._animation_started_ms)
        return self._props

    def view(self, now_ms: Optional[float] = None) -> RevealView:
        if self.state is RevealState.error:
            return RevealView(
                state=self.state,
                card=None,
                template=None,
                props=FINAL_PROPS,
                footer_visible=False,
                error_kind=self.error_kind,
                error_title=ERROR_TITLE,
                error_subtitle=ERROR_SUBTITLE,
            )
        return RevealView(
            state=self.state,
            card=self.card,
            template=self.template,
            props=self.props(now_ms),
            footer_visible=self.footer_visible,
            footer_text=FOOTER_TEXT if self.footer_visible else None,
        )

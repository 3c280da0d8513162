from __future__ import annotations

import asyncio
from typing import List

import pytest

from messagecards.cards.errors import CardNotFound
from messagecards.cards.models import Card, CardCreate
from messagecards.cards.repository import InMemoryCardRepository
from messagecards.cards.service import CardService
from messagecards.reveal.fetchers import CardFetchError, ServiceCardFetcher
from messagecards.reveal.orchestrator import (
    ERROR_TITLE,
    FOOTER_TEXT,
    RevealErrorKind,
    RevealOrchestrator,
    RevealState,
)
from messagecards.reveal.scheduler import ManualScheduler
from messagecards.reveal.timeline import FINAL_PROPS, INITIAL_PROPS
from messagecards.view_state.models import ViewStateResult
from messagecards.view_state.repository import InMemoryViewStateRepository
from messagecards.view_state.service import ViewStateTracker

S = RevealState


class CountingRepo(InMemoryViewStateRepository):
    def __init__(self) -> None:
        super().__init__()
        self.writes: List[str] = []

    def write(self, card_id: str) -> ViewStateResult:
        self.writes.append(card_id)
        return super().write(card_id)


class CountingFetcher:
    def __init__(self, inner) -> None:
        self.inner = inner
        self.calls = 0

    async def fetch(self, card_id: str) -> Card:
        self.calls += 1
        return await self.inner.fetch(card_id)


class FailingFetcher:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    async def fetch(self, card_id: str) -> Card:
        raise self.exc


@pytest.fixture
def service():
    return CardService(repo=InMemoryCardRepository())


@pytest.fixture
def card(service):
    return service.create(
        CardCreate(template_id="template1", message="ありがとうございます", sender_name="スタッフ一同")
    )


@pytest.fixture
def view_repo():
    return CountingRepo()


def _orchestrator(card_id, service, view_repo, scheduler=None, fetcher=None):
    return RevealOrchestrator(
        card_id,
        fetcher or ServiceCardFetcher(service),
        ViewStateTracker(view_repo),
        scheduler=scheduler or ManualScheduler(),
    )


def test_first_view_animates_for_2000ms_then_commits(service, card, view_repo):
    sched = ManualScheduler()
    orch = _orchestrator(card.id, service, view_repo, sched)

    assert asyncio.run(orch.start()) is S.animating
    assert orch.transitions == [
        (S.idle, S.loading),
        (S.loading, S.ready_first_view),
        (S.ready_first_view, S.animating),
    ]
    assert orch.view().footer_visible is False
    assert orch.props() == INITIAL_PROPS

    sched.advance(1999)
    assert orch.state is S.animating
    assert view_repo.writes == []
    assert orch.props() == FINAL_PROPS  # tracks finish early; commit still waits

    sched.advance(1)
    assert orch.state is S.settled
    assert view_repo.writes == [card.id]
    assert orch.elapsed_to_settle_ms == 2000
    view = orch.view()
    assert view.footer_visible is True
    assert view.footer_text == FOOTER_TEXT
    assert view.card.message == "ありがとうございます"
    assert view.template.id == "template1"


def test_second_open_skips_animation(service, card, view_repo):
    first_sched = ManualScheduler()
    first = _orchestrator(card.id, service, view_repo, first_sched)
    asyncio.run(first.start())
    first_sched.advance(2000)
    first.unmount()

    sched = ManualScheduler()
    second = _orchestrator(card.id, service, view_repo, sched)
    assert asyncio.run(second.start()) is S.settled
    assert second.transitions == [
        (S.idle, S.loading),
        (S.loading, S.ready_repeat_view),
        (S.ready_repeat_view, S.settled),
    ]
    assert second.elapsed_to_settle_ms == 0
    assert second.props() == FINAL_PROPS
    assert second.footer_visible is True
    assert sched.pending() == 0
    assert view_repo.writes == [card.id]


def test_view_flag_flips_exactly_once_across_many_opens(service, card, view_repo):
    tracker = ViewStateTracker(view_repo)
    states = []
    for _ in range(4):
        sched = ManualScheduler()
        orch = RevealOrchestrator(card.id, ServiceCardFetcher(service), tracker, scheduler=sched)
        asyncio.run(orch.start())
        sched.advance(5000)
        states.append([new for _, new in orch.transitions])
    assert view_repo.writes == [card.id]
    assert S.animating in states[0]
    assert all(S.animating not in s for s in states[1:])


def test_unmount_before_timer_suppresses_commit(service, card, view_repo):
    sched = ManualScheduler()
    orch = _orchestrator(card.id, service, view_repo, sched)
    asyncio.run(orch.start())
    sched.advance(1000)
    orch.unmount()
    assert orch.mounted is False
    assert sched.pending() == 0
    sched.advance(5000)
    assert orch.state is S.animating
    assert view_repo.writes == []
    assert ViewStateTracker(view_repo).has_viewed(card.id) is False


def test_late_timer_after_unmount_is_a_no_op(service, card, view_repo):
    sched = ManualScheduler()
    orch = _orchestrator(card.id, service, view_repo, sched)
    asyncio.run(orch.start())
    orch._mounted = False  # timer not cancelled: simulate it racing teardown
    sched.advance(2000)
    assert orch.state is S.animating
    assert view_repo.writes == []


@pytest.mark.parametrize("card_id", [None, "", "   "])
def test_missing_id_fails_fast_without_fetch(service, view_repo, card_id):
    fetcher = CountingFetcher(ServiceCardFetcher(service))
    orch = _orchestrator(card_id, service, view_repo, fetcher=fetcher)
    assert asyncio.run(orch.start()) is S.error
    assert orch.transitions == [(S.idle, S.error)]
    assert orch.error_kind is RevealErrorKind.missing_id
    assert fetcher.calls == 0


def test_not_found_is_terminal_error(service, view_repo):
    orch = _orchestrator("non-existent-id-12345", service, view_repo)
    assert asyncio.run(orch.start()) is S.error
    view = orch.view()
    assert view.error_kind is RevealErrorKind.not_found
    assert view.error_title == ERROR_TITLE
    assert view.card is None
    assert view_repo.writes == []


def test_inactive_card_looks_like_not_found(service, view_repo):
    service.repo.insert(Card(id="inactive1", template_id="template1", message="x", is_active=False))
    orch = _orchestrator("inactive1", service, view_repo)
    asyncio.run(orch.start())
    assert orch.error_kind is RevealErrorKind.not_found


def test_network_failure_is_terminal_without_retry(service, view_repo):
    orch = _orchestrator("abc", service, view_repo, fetcher=FailingFetcher(CardFetchError("offline")))
    assert asyncio.run(orch.start()) is S.error
    assert orch.error_kind is RevealErrorKind.fetch_failed
    assert orch.transitions[-1] == (S.loading, S.error)


def test_unknown_template_renders_error_and_does_not_mark(service, view_repo):
    card = service.create(CardCreate(template_id="template-unknown", message="hi"))
    sched = ManualScheduler()
    orch = _orchestrator(card.id, service, view_repo, sched)
    assert asyncio.run(orch.start()) is S.error
    assert orch.error_kind is RevealErrorKind.template_missing
    sched.advance(5000)
    assert view_repo.writes == []


def test_storage_failure_replays_animation(service, card):
    class BrokenRepo:
        def read(self, card_id):
            raise OSError("locked")

        def write(self, card_id):
            return ViewStateResult.failure("read-only")

    sched = ManualScheduler()
    orch = RevealOrchestrator(card.id, ServiceCardFetcher(service), ViewStateTracker(BrokenRepo()), scheduler=sched)
    assert asyncio.run(orch.start()) is S.animating
    sched.advance(2000)
    assert orch.state is S.settled


def test_start_twice_is_rejected(service, card, view_repo):
    orch = _orchestrator(card.id, service, view_repo)
    asyncio.run(orch.start())
    with pytest.raises(RuntimeError):
        asyncio.run(orch.start())


def test_listeners_see_every_transition(service, card, view_repo):
    seen = []
    sched = ManualScheduler()
    orch = _orchestrator(card.id, service, view_repo, sched)
    orch.subscribe(lambda old, new: seen.append(new))
    asyncio.run(orch.start())
    sched.advance(2000)
    assert seen == [S.loading, S.ready_first_view, S.animating, S.settled]


def test_from_share_url(service, card, view_repo):
    orch = RevealOrchestrator.from_share_url(
        f"https://cards.example.test/card/{card.id}",
        ServiceCardFetcher(service),
        ViewStateTracker(view_repo),
        scheduler=ManualScheduler(),
    )
    assert orch.card_id == card.id
    assert asyncio.run(orch.start()) is S.animating


def test_fetch_and_view_state_read_both_resolve_before_ready(service, card, view_repo):
    order = []

    class SlowFetcher:
        async def fetch(self, card_id):
            await asyncio.sleep(0.01)
            order.append("fetch")
            return service.get_by_id(card_id)

    class RecordingRepo(InMemoryViewStateRepository):
        def read(self, card_id):
            order.append("read")
            return super().read(card_id)

    orch = RevealOrchestrator(card.id, SlowFetcher(), ViewStateTracker(RecordingRepo()), scheduler=ManualScheduler())
    orch.subscribe(lambda old, new: order.append(new.value))
    asyncio.run(orch.start())
    assert order.index("fetch") < order.index("ready_first_view")
    assert order.index("read") < order.index("ready_first_view")


def test_asyncio_scheduler_end_to_end(service, card, view_repo):
    from messagecards.reveal.timeline import RevealTimeline

    async def run():
        orch = RevealOrchestrator(
            card.id,
            ServiceCardFetcher(service),
            ViewStateTracker(view_repo),
            timeline=RevealTimeline(duration_ms=20),
        )
        await orch.start()
        await asyncio.sleep(0.1)
        return orch.state

    assert asyncio.run(run()) is S.settled
    assert view_repo.writes == [card.id]


def test_not_found_exception_type_from_fetcher(service, view_repo):
    orch = _orchestrator("x", service, view_repo, fetcher=FailingFetcher(CardNotFound("x")))
    asyncio.run(orch.start())
    assert orch.error_kind is RevealErrorKind.not_found

"""FeedScheduler 测试：并发抓取、故障隔离、过期结果丢弃与定时循环。"""

import asyncio
from unittest.mock import MagicMock

import pytest

from newshub.core.domain.events import EventBus
from newshub.core.infrastructure.logging import BusinessEvents
from newshub.modules.feeds.application.scheduler import FeedScheduler
from newshub.modules.feeds.domain.entities import (
    NormalizedItem,
    SourceConfig,
    SourceFailure,
    SourceResult,
    SourceStatus,
    SourceSuccess,
)
from newshub.modules.feeds.domain.events import (
    FeedCycleCompletedEvent,
    SourceFailedEvent,
    SourceResolvedEvent,
)
from newshub.modules.feeds.domain.exceptions import SourceNotFoundError
from newshub.modules.feeds.domain.registry import FeedRegistry
from tests.conftest import FIXED_NOW, collect_events, make_source

pytestmark = pytest.mark.anyio


def _success(source_id: str, title: str = "Headline") -> SourceSuccess:
    return SourceSuccess(
        source_id=source_id,
        items=(NormalizedItem(title=title, published_at=FIXED_NOW, rank=0),),
        update_label="just updated",
        endpoint=f"https://feeds.example.com/{source_id}.xml",
        resolved_at=FIXED_NOW,
    )


def _failure(source_id: str, reason: str = "HTTP error! status: 500") -> SourceFailure:
    return SourceFailure(source_id=source_id, reason=reason, resolved_at=FIXED_NOW)


class _ScriptedResolver:
    """每个源按调用顺序返回预设结果；gate 不为空时等待放行后才返回。"""

    def __init__(
        self,
        scripts: dict[str, list[tuple[asyncio.Event | None, SourceResult | Exception]]],
    ):
        self.scripts = scripts
        self.started: list[str] = []

    async def resolve(self, config: SourceConfig) -> SourceResult:
        self.started.append(config.id)
        gate, outcome = self.scripts[config.id].pop(0)
        if gate is not None:
            await gate.wait()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


async def _wait_until(predicate, attempts: int = 200) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


async def test_run_cycle_records_every_source(two_source_registry, fake_clock) -> None:
    resolver = _ScriptedResolver(
        {
            "reuters": [(None, _success("reuters"))],
            "bbc": [(None, _failure("bbc"))],
        }
    )
    bus = EventBus()
    events = collect_events(
        bus, SourceResolvedEvent, SourceFailedEvent, FeedCycleCompletedEvent
    )
    scheduler = FeedScheduler(
        two_source_registry, resolver, event_bus=bus, clock=fake_clock
    )

    results = await scheduler.run_cycle()

    assert list(results) == ["reuters", "bbc"]
    assert results["reuters"].is_success is True
    assert results["bbc"].is_success is False
    assert scheduler.store.get("reuters").status is SourceStatus.SUCCESS
    assert scheduler.store.get("bbc").status is SourceStatus.FAILURE

    snapshot = scheduler.store.snapshot()
    assert snapshot.cycles_completed == 1
    assert snapshot.last_updated_at == FIXED_NOW

    assert [type(e) for e in events] == [
        SourceResolvedEvent,
        SourceFailedEvent,
        FeedCycleCompletedEvent,
    ]
    completed = events[-1]
    assert completed.succeeded == 1
    assert completed.failed == 1


async def test_sources_are_resolved_concurrently(two_source_registry, fake_clock) -> None:
    """两个源同时在途，任一源未完成前本轮不会结束。"""
    reuters_gate, bbc_gate = asyncio.Event(), asyncio.Event()
    resolver = _ScriptedResolver(
        {
            "reuters": [(reuters_gate, _success("reuters"))],
            "bbc": [(bbc_gate, _success("bbc"))],
        }
    )
    scheduler = FeedScheduler(two_source_registry, resolver, clock=fake_clock)

    cycle = asyncio.create_task(scheduler.run_cycle())
    await _wait_until(lambda: len(resolver.started) == 2)

    assert scheduler.store.get("reuters").status is SourceStatus.LOADING
    assert scheduler.store.get("bbc").status is SourceStatus.LOADING

    bbc_gate.set()
    await _wait_until(
        lambda: scheduler.store.get("bbc").status is SourceStatus.SUCCESS
    )
    assert not cycle.done()
    assert scheduler.store.last_updated_at is None

    reuters_gate.set()
    await cycle
    assert scheduler.store.last_updated_at == FIXED_NOW


async def test_one_source_crashing_does_not_affect_others(
    two_source_registry, fake_clock
) -> None:
    resolver = _ScriptedResolver(
        {
            "reuters": [(None, RuntimeError("resolver bug"))],
            "bbc": [(None, _success("bbc"))],
        }
    )
    scheduler = FeedScheduler(two_source_registry, resolver, clock=fake_clock)

    results = await scheduler.run_cycle()

    assert results["reuters"].is_success is False
    assert results["reuters"].reason == "resolver bug"
    assert results["bbc"].is_success is True
    assert scheduler.store.snapshot().cycles_completed == 1


async def test_superseded_cycle_cannot_overwrite_newer_result(fake_clock) -> None:
    registry = FeedRegistry([make_source("reuters")])
    slow_gate = asyncio.Event()
    resolver = _ScriptedResolver(
        {
            "reuters": [
                (slow_gate, _success("reuters", "stale")),
                (None, _success("reuters", "fresh")),
            ]
        }
    )
    bus = EventBus()
    resolved = collect_events(bus, SourceResolvedEvent)
    scheduler = FeedScheduler(registry, resolver, event_bus=bus, clock=fake_clock)

    first = asyncio.create_task(scheduler.run_cycle())
    await _wait_until(lambda: len(resolver.started) == 1)
    await scheduler.refresh_all()

    slow_gate.set()
    await first

    slot = scheduler.store.get("reuters")
    assert slot.result.items[0].title == "fresh"
    assert slot.status is SourceStatus.SUCCESS
    assert [event.sequence for event in resolved] == [2]


async def test_retry_resolves_single_source(two_source_registry, fake_clock) -> None:
    resolver = _ScriptedResolver(
        {
            "reuters": [(None, _failure("reuters")), (None, _success("reuters"))],
            "bbc": [(None, _success("bbc"))],
        }
    )
    scheduler = FeedScheduler(two_source_registry, resolver, clock=fake_clock)
    await scheduler.run_cycle()

    result = await scheduler.retry("reuters")

    assert result.is_success is True
    assert scheduler.store.get("reuters").status is SourceStatus.SUCCESS
    assert resolver.started == ["reuters", "bbc", "reuters"]
    # 单源重试不算完整一轮
    assert scheduler.store.snapshot().cycles_completed == 1


async def test_retry_during_running_cycle_keeps_retry_result(
    two_source_registry, fake_clock, monkeypatch
) -> None:
    """单源重试先于进行中的整轮完成时，整轮迟到的结果被丢弃。"""
    discarded = MagicMock()
    monkeypatch.setattr(BusinessEvents, "feed_result_discarded", discarded)
    slow_gate = asyncio.Event()
    resolver = _ScriptedResolver(
        {
            "reuters": [
                (slow_gate, _failure("reuters", "late cycle result")),
                (None, _success("reuters", "from retry")),
            ],
            "bbc": [(None, _success("bbc"))],
        }
    )
    bus = EventBus()
    events = collect_events(bus, SourceResolvedEvent, SourceFailedEvent)
    scheduler = FeedScheduler(
        two_source_registry, resolver, event_bus=bus, clock=fake_clock
    )

    cycle = asyncio.create_task(scheduler.run_cycle())
    await _wait_until(lambda: len(resolver.started) == 2)

    retried = await scheduler.retry("reuters")
    assert retried.is_success is True

    slow_gate.set()
    await cycle

    slot = scheduler.store.get("reuters")
    assert slot.status is SourceStatus.SUCCESS
    assert slot.result.items[0].title == "from retry"
    assert slot.sequence == 3

    discarded.assert_called_once_with(
        source_id="reuters", sequence=1, current_sequence=3
    )
    assert not any(isinstance(event, SourceFailedEvent) for event in events)
    assert scheduler.store.snapshot().cycles_completed == 1


async def test_retry_unknown_source_raises(two_source_registry, fake_clock) -> None:
    scheduler = FeedScheduler(
        two_source_registry, _ScriptedResolver({}), clock=fake_clock
    )

    with pytest.raises(SourceNotFoundError):
        await scheduler.retry("nope")


async def test_start_runs_initial_cycle_then_waits_interval(
    two_source_registry, fake_clock
) -> None:
    resolver = _ScriptedResolver(
        {
            "reuters": [(None, _success("reuters"))],
            "bbc": [(None, _success("bbc"))],
        }
    )
    scheduler = FeedScheduler(
        two_source_registry, resolver, interval_sec=300, clock=fake_clock
    )

    scheduler.start()
    scheduler.start()
    assert scheduler.is_running is True

    await _wait_until(lambda: fake_clock.sleeps)
    assert fake_clock.sleeps == [300]
    assert scheduler.store.snapshot().cycles_completed == 1

    await scheduler.stop()
    assert scheduler.is_running is False
    assert resolver.started == ["reuters", "bbc"]


async def test_stop_without_start_is_noop(two_source_registry) -> None:
    scheduler = FeedScheduler(two_source_registry, _ScriptedResolver({}))

    await scheduler.stop()

    assert scheduler.is_running is False

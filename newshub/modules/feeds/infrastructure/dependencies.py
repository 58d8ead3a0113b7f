"""Feed module dependencies."""

from newshub.core.domain.clock import Clock, SystemClock
from newshub.core.domain.events import EventBus
from newshub.modules.feeds.application.resolver import SourceResolver
from newshub.modules.feeds.application.scheduler import FeedScheduler
from newshub.modules.feeds.domain.ports import FeedFetcher
from newshub.modules.feeds.domain.registry import FeedRegistry
from newshub.modules.feeds.infrastructure.registry import build_default_registry
from newshub.modules.feeds.infrastructure.transport import FeedTransport

_scheduler: FeedScheduler | None = None


def build_feed_scheduler(
    registry: FeedRegistry | None = None,
    fetcher: FeedFetcher | None = None,
    event_bus: EventBus | None = None,
    clock: Clock | None = None,
) -> FeedScheduler:
    clock = clock or SystemClock()
    resolver = SourceResolver(fetcher=fetcher or FeedTransport(), clock=clock)
    return FeedScheduler(
        registry=registry or build_default_registry(),
        resolver=resolver,
        event_bus=event_bus,
        clock=clock,
    )


def get_feed_scheduler() -> FeedScheduler:
    """Process-wide scheduler (lazy)."""
    global _scheduler
    if _scheduler is None:
        _scheduler = build_feed_scheduler()
    return _scheduler


def set_feed_scheduler(scheduler: FeedScheduler) -> None:
    global _scheduler
    _scheduler = scheduler


def reset_feed_scheduler() -> None:
    global _scheduler
    _scheduler = None

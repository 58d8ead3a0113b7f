"""Feed module application dependencies."""

from typing import NoReturn

from newshub.modules.feeds.application.scheduler import FeedScheduler


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_feed_scheduler() -> FeedScheduler:
    _missing_dependency("FeedScheduler")

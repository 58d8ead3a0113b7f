"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不访问网络，HTTP 通过 httpx.MockTransport 或假 fetcher 模拟）

使用方法：
    # 运行所有测试
    pytest

    # 只运行单元测试
    pytest tests/unit/
"""

import asyncio
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta

import pytest

from newshub.core.domain.events import DomainEvent, EventBus
from newshub.modules.feeds.domain.entities import SourceConfig
from newshub.modules.feeds.domain.registry import FeedRegistry

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def anyio_backend() -> str:
    """代码依赖 asyncio（asyncio.timeout / create_task），只跑 asyncio 后端。"""
    return "asyncio"


# ============================================
# Feed payload builders
# ============================================


def rss_feed(titles: Iterable[str], pub_date: str | None = None) -> str:
    """Build an RSS 2.0 document with one <item> per title."""
    items = []
    for index, title in enumerate(titles):
        date = f"<pubDate>{pub_date}</pubDate>" if pub_date else ""
        items.append(
            f"<item><title>{title}</title>"
            f"<link>https://example.com/{index}</link>"
            f"<description>summary {index}</description>{date}</item>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel><title>Example</title>'
        f"{''.join(items)}</channel></rss>"
    )


def atom_feed(titles: Iterable[str], updated: str = "2024-05-01T11:30:00Z") -> str:
    """Build an Atom document with one <entry> per title."""
    entries = "".join(
        f"<entry><title>{title}</title>"
        f'<link rel="alternate" href="https://example.com/atom/{index}"/>'
        f"<summary>atom summary {index}</summary>"
        f"<updated>{updated}</updated></entry>"
        for index, title in enumerate(titles)
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<feed xmlns="http://www.w3.org/2005/Atom"><title>Example</title>'
        f"{entries}</feed>"
    )


# ============================================
# Fakes
# ============================================


class FakeClock:
    """固定时间的时钟；sleep 只记录时长并挂起，直到被取消。"""

    def __init__(self, now: datetime = FIXED_NOW):
        self.current = now
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        await asyncio.Event().wait()


class FakeFetcher:
    """按 URL 返回预设响应；响应可以是字符串或异常。"""

    def __init__(self, responses: dict[str, str | Exception]):
        self.responses = responses
        self.calls: list[str] = []

    async def fetch_with_fallback(self, url: str) -> str:
        self.calls.append(url)
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


def make_source(
    source_id: str = "reuters",
    endpoints: Iterable[str] | None = None,
) -> SourceConfig:
    return SourceConfig(
        id=source_id,
        display_name=source_id.upper(),
        category_tag="test",
        candidate_endpoints=tuple(
            endpoints or (f"https://feeds.example.com/{source_id}.xml",)
        ),
    )


def collect_events(bus: EventBus, *event_types: type[DomainEvent]) -> list[DomainEvent]:
    received: list[DomainEvent] = []
    for event_type in event_types:
        bus.subscribe_func(event_type, received.append)
    return received


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def source_factory() -> Callable[..., SourceConfig]:
    return make_source


@pytest.fixture
def two_source_registry() -> FeedRegistry:
    return FeedRegistry([make_source("reuters"), make_source("bbc")])

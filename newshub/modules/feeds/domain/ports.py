"""Feed domain ports."""

from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from newshub.modules.feeds.domain.entities import NormalizedItem, SourceConfig, SourceResult


class FeedFetcher(Protocol):
    """Port for retrieving one endpoint through the access-strategy chain."""

    async def fetch_with_fallback(self, url: str) -> str: ...


FeedParser = Callable[[str, datetime], list[NormalizedItem]]


class SourceResolverPort(Protocol):
    async def resolve(self, config: SourceConfig) -> SourceResult: ...

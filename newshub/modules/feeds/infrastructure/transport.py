"""Feed transport.

一次请求带超时（fetch_once），外层按访问策略顺序回退（fetch_with_fallback）：
先直连，再依次经过中继代理。策略串行尝试，不并发，避免给中继造成重复负载。
"""

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from urllib.parse import quote, urlparse

import httpx
from loguru import logger

from newshub.core.config import settings
from newshub.modules.feeds.domain.exceptions import (
    AllStrategiesExhaustedError,
    FeedError,
    FeedHttpError,
    FeedNetworkError,
    FeedTimeoutError,
)

# Characters encodeURIComponent leaves untouched.
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class AccessStrategy:
    """A named URL transformer applied before each fetch."""

    name: str
    transform: Callable[[str], str]

    def apply(self, url: str) -> str:
        return self.transform(url)

    @classmethod
    def direct(cls) -> "AccessStrategy":
        return cls(name="direct", transform=lambda url: url)

    @classmethod
    def relay(cls, prefix: str) -> "AccessStrategy":
        name = urlparse(prefix).netloc or prefix
        return cls(
            name=f"relay:{name}",
            transform=lambda url: prefix + quote(url, safe=_URI_COMPONENT_SAFE),
        )


def build_access_strategies(
    direct_first: bool | None = None,
    relay_prefixes: Sequence[str] | None = None,
) -> tuple[AccessStrategy, ...]:
    """Build the process-wide strategy chain from settings."""
    if direct_first is None:
        direct_first = settings.FEED_DIRECT_FIRST
    if relay_prefixes is None:
        relay_prefixes = settings.FEED_RELAY_PREFIXES

    strategies: list[AccessStrategy] = []
    if direct_first:
        strategies.append(AccessStrategy.direct())
    strategies.extend(AccessStrategy.relay(prefix) for prefix in relay_prefixes)

    if not strategies:
        raise ValueError("At least one access strategy is required")
    return tuple(strategies)


class FeedTransport:
    """HTTP access to feed endpoints.

    传入 client 时复用该连接池（测试中通常是挂了 MockTransport 的 client）；
    否则每次请求创建一个短生命周期的 AsyncClient。
    """

    def __init__(
        self,
        strategies: Sequence[AccessStrategy] | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_ms: int | None = None,
        user_agent: str | None = None,
        accept: str | None = None,
    ):
        if strategies is None:
            strategies = build_access_strategies()
        if not strategies:
            raise ValueError("At least one access strategy is required")
        self.strategies = tuple(strategies)
        self.timeout_ms = timeout_ms or settings.FEED_FETCH_TIMEOUT_MS
        self._client = client
        self._headers = {
            "User-Agent": user_agent or settings.FEED_USER_AGENT,
            "Accept": accept or settings.FEED_ACCEPT_HEADER,
        }

    async def fetch_once(self, url: str, timeout_ms: int | None = None) -> str:
        """Fetch one URL and return the body text.

        Raises:
            FeedTimeoutError: no response within timeout_ms
            FeedHttpError: non-2xx status
            FeedNetworkError: transport level failure
        """
        timeout_ms = timeout_ms or self.timeout_ms
        timeout_sec = timeout_ms / 1000

        try:
            async with asyncio.timeout(timeout_sec):
                if self._client is not None:
                    response = await self._client.get(
                        url, headers=self._headers, timeout=timeout_sec
                    )
                else:
                    async with httpx.AsyncClient(
                        timeout=timeout_sec,
                        follow_redirects=True,
                    ) as client:
                        response = await client.get(url, headers=self._headers)
        except (TimeoutError, httpx.TimeoutException) as e:
            raise FeedTimeoutError(url, timeout_ms) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FeedNetworkError(url, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise FeedHttpError(url, response.status_code)

        return response.text

    async def fetch_with_fallback(self, url: str) -> str:
        """Try every access strategy in order, return the first body.

        Raises:
            AllStrategiesExhaustedError: every strategy failed; carries the last error
        """
        last_error: FeedError | None = None

        for strategy in self.strategies:
            target = strategy.apply(url)
            try:
                body = await self.fetch_once(target)
            except FeedError as e:
                logger.warning(
                    f"Access strategy {strategy.name} failed for {url}: {e.message}"
                )
                last_error = e
                continue

            logger.debug(f"Fetched {url} via {strategy.name}")
            return body

        raise AllStrategiesExhaustedError(url, last_error)

"""Source resolver.

按声明顺序遍历一个源的候选 feed 地址：抓取（含访问策略回退）→ 解析。
第一个产出非空条目的地址即成功；全部失败时返回携带最后一个错误信息的失败结果。
单个地址每周期只尝试一次，异常不会逃逸出 resolve。
"""

import time

from loguru import logger

from newshub.core.domain.clock import Clock, SystemClock
from newshub.core.infrastructure.logging import BusinessEvents
from newshub.modules.feeds.application.time_format import format_time_ago
from newshub.modules.feeds.domain.entities import (
    SourceConfig,
    SourceFailure,
    SourceResult,
    SourceSuccess,
)
from newshub.modules.feeds.domain.exceptions import FeedError
from newshub.modules.feeds.domain.ports import FeedFetcher, FeedParser
from newshub.modules.feeds.infrastructure.parser import parse_feed


class SourceResolver:
    """Walks a source's endpoint fallback chain and produces a SourceResult."""

    def __init__(
        self,
        fetcher: FeedFetcher,
        parser: FeedParser = parse_feed,
        clock: Clock | None = None,
    ):
        self.fetcher = fetcher
        self.parser = parser
        self.clock = clock or SystemClock()

    async def resolve(self, config: SourceConfig) -> SourceResult:
        """Resolve one source. Never raises.

        Args:
            config: source to resolve

        Returns:
            SourceSuccess for the first endpoint with items, else SourceFailure
        """
        start_time = time.time()
        last_error: Exception | None = None

        for endpoint in config.candidate_endpoints:
            logger.info(f"Fetching {config.display_name} from {endpoint}")
            try:
                body = await self.fetcher.fetch_with_fallback(endpoint)
                items = self.parser(body, self.clock.now())
            except FeedError as e:
                logger.warning(
                    f"Failed to fetch {config.display_name} from {endpoint}: {e.message}"
                )
                last_error = e
                continue
            except Exception as e:
                logger.exception(
                    f"Unexpected error resolving {config.display_name} from {endpoint}: {e}"
                )
                last_error = e
                continue

            now = self.clock.now()
            duration_ms = int((time.time() - start_time) * 1000)
            logger.info(
                f"{config.display_name}: loaded {len(items)} items "
                f"from {endpoint} in {duration_ms}ms"
            )
            BusinessEvents.feed_source_resolved(
                source_id=config.id,
                items_count=len(items),
                endpoint=endpoint,
                duration_ms=duration_ms,
            )
            return SourceSuccess(
                source_id=config.id,
                items=tuple(items),
                update_label=format_time_ago(items[0].published_at, now=now),
                endpoint=endpoint,
                resolved_at=now,
            )

        reason = str(last_error) if last_error else "Unknown error"
        logger.warning(f"{config.display_name}: all fetch attempts failed")
        BusinessEvents.feed_source_failed(
            source_id=config.id,
            reason=reason,
            endpoints_tried=len(config.candidate_endpoints),
        )
        return SourceFailure(
            source_id=config.id,
            reason=reason,
            resolved_at=self.clock.now(),
        )

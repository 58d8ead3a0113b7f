"""Fan-out scheduler.

并发解析注册表中的所有源，等待全部结束后标记本轮完成；
首轮完成后按固定周期重复，手动刷新与单源重试不依赖定时器。
"""

import asyncio
import time
from contextlib import suppress

from loguru import logger

from newshub.core.config import settings
from newshub.core.domain.clock import Clock, SystemClock
from newshub.core.domain.events import EventBus
from newshub.core.infrastructure.logging import BusinessEvents
from newshub.modules.feeds.application.store import SourceResultStore
from newshub.modules.feeds.domain.entities import (
    SourceConfig,
    SourceFailure,
    SourceResult,
    SourceSuccess,
)
from newshub.modules.feeds.domain.events import (
    FeedCycleCompletedEvent,
    SourceFailedEvent,
    SourceResolvedEvent,
)
from newshub.modules.feeds.domain.ports import SourceResolverPort
from newshub.modules.feeds.domain.registry import FeedRegistry


class FeedScheduler:
    """Drives SourceResolver across every registered source.

    The scheduler owns the keyed result store. Every resolution is tagged with
    a sequence number at start; the store drops results older than the one it
    already holds, so a superseded cycle finishing late cannot clobber a newer
    result.
    """

    def __init__(
        self,
        registry: FeedRegistry,
        resolver: SourceResolverPort,
        store: SourceResultStore | None = None,
        event_bus: EventBus | None = None,
        *,
        interval_sec: float | None = None,
        clock: Clock | None = None,
    ):
        self.registry = registry
        self.resolver = resolver
        self.store = store or SourceResultStore(registry.ids)
        self.event_bus = event_bus or EventBus()
        self.interval_sec = interval_sec or settings.FEED_REFRESH_INTERVAL_SEC
        self.clock = clock or SystemClock()
        self._cycle_id = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_cycle(self) -> dict[str, SourceResult]:
        """Resolve all sources concurrently and wait for every one to settle."""
        self._cycle_id += 1
        cycle_id = self._cycle_id
        started_at = self.clock.now()
        start_time = time.time()

        configs = list(self.registry)
        sequences = [self.store.begin(config.id) for config in configs]
        logger.info(f"Feed cycle {cycle_id}: fetching {len(configs)} sources")

        results = await asyncio.gather(
            *(
                self._resolve_and_commit(config, sequence)
                for config, sequence in zip(configs, sequences, strict=True)
            )
        )

        completed_at = self.clock.now()
        self.store.mark_cycle_completed(completed_at)

        succeeded = sum(1 for result in results if result.is_success)
        failed = len(results) - succeeded
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Feed cycle {cycle_id} complete: {succeeded} succeeded, {failed} failed"
        )
        BusinessEvents.feed_cycle_completed(
            cycle_id=cycle_id,
            succeeded=succeeded,
            failed=failed,
            duration_ms=duration_ms,
        )
        await self.event_bus.publish(
            FeedCycleCompletedEvent(
                cycle_id=cycle_id,
                succeeded=succeeded,
                failed=failed,
                started_at=started_at,
                completed_at=completed_at,
            )
        )

        return {config.id: result for config, result in zip(configs, results, strict=True)}

    async def refresh_all(self) -> dict[str, SourceResult]:
        """Manual full refresh, independent of the timer."""
        return await self.run_cycle()

    async def retry(self, source_id: str) -> SourceResult:
        """Re-resolve a single source.

        Raises:
            SourceNotFoundError: unknown source_id
        """
        config = self.registry.get(source_id)
        sequence = self.store.begin(source_id)
        logger.info(f"Retrying source {source_id}")
        return await self._resolve_and_commit(config, sequence)

    def start(self) -> None:
        """Run the initial cycle in the background, then repeat every interval."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run_forever(), name="feed-scheduler")
        logger.info(f"Feed scheduler started, interval={self.interval_sec}s")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        logger.info("Feed scheduler stopped")

    async def _run_forever(self) -> None:
        while True:
            try:
                await self.run_cycle()
            except Exception as e:
                logger.exception(f"Feed cycle failed unexpectedly: {e}")
            await self.clock.sleep(self.interval_sec)

    async def _resolve_and_commit(
        self, config: SourceConfig, sequence: int
    ) -> SourceResult:
        try:
            result = await self.resolver.resolve(config)
        except Exception as e:
            logger.exception(f"Resolver raised for {config.id}: {e}")
            result = SourceFailure(
                source_id=config.id,
                reason=str(e) or type(e).__name__,
                resolved_at=self.clock.now(),
            )

        accepted = self.store.commit(config.id, sequence, result, at=self.clock.now())
        if not accepted:
            BusinessEvents.feed_result_discarded(
                source_id=config.id,
                sequence=sequence,
                current_sequence=self.store.get(config.id).sequence,
            )
            return result

        await self._publish_result(sequence, result)
        return result

    async def _publish_result(self, sequence: int, result: SourceResult) -> None:
        if isinstance(result, SourceSuccess):
            await self.event_bus.publish(
                SourceResolvedEvent(
                    source_id=result.source_id,
                    sequence=sequence,
                    items_count=len(result.items),
                    endpoint=result.endpoint,
                )
            )
        else:
            await self.event_bus.publish(
                SourceFailedEvent(
                    source_id=result.source_id,
                    sequence=sequence,
                    reason=result.reason,
                )
            )

"""Keyed per-source result store with sequence-tagged writes.

每次解析开始时领取一个全局递增序号（begin），写回时带上该序号（commit）。
只有比当前已接受结果更新的序号才会被接受，旧周期迟到的结果直接丢弃。
单线程事件循环下不需要锁，序号即是单写者约束。
"""

from collections.abc import Iterable
from datetime import datetime

from newshub.modules.feeds.domain.entities import (
    BoardSnapshot,
    SourceResult,
    SourceSlot,
    SourceStatus,
)
from newshub.modules.feeds.domain.exceptions import SourceNotFoundError


class SourceResultStore:
    def __init__(self, source_ids: Iterable[str]):
        self._slots: dict[str, SourceSlot] = {
            source_id: SourceSlot(source_id=source_id) for source_id in source_ids
        }
        self._sequence = 0
        self._last_updated_at: datetime | None = None
        self._cycles_completed = 0

    def begin(self, source_id: str) -> int:
        """Issue a sequence tag for a resolution that is about to start."""
        slot = self.get(source_id)
        self._sequence += 1
        self._slots[source_id] = slot.model_copy(
            update={
                "pending_sequence": self._sequence,
                "status": SourceStatus.LOADING,
            }
        )
        return self._sequence

    def commit(
        self,
        source_id: str,
        sequence: int,
        result: SourceResult,
        at: datetime,
    ) -> bool:
        """Record result unless a newer one already landed.

        Returns:
            True if accepted, False if discarded as stale.
        """
        slot = self.get(source_id)
        if sequence <= slot.sequence:
            return False

        # still loading when a newer resolution started after this one
        if slot.pending_sequence > sequence:
            status = SourceStatus.LOADING
        elif result.is_success:
            status = SourceStatus.SUCCESS
        else:
            status = SourceStatus.FAILURE

        self._slots[source_id] = slot.model_copy(
            update={
                "status": status,
                "result": result,
                "sequence": sequence,
                "updated_at": at,
            }
        )
        return True

    def get(self, source_id: str) -> SourceSlot:
        try:
            return self._slots[source_id]
        except KeyError:
            raise SourceNotFoundError(source_id) from None

    def mark_cycle_completed(self, at: datetime) -> None:
        self._last_updated_at = at
        self._cycles_completed += 1

    @property
    def last_updated_at(self) -> datetime | None:
        return self._last_updated_at

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            slots=tuple(self._slots.values()),
            last_updated_at=self._last_updated_at,
            cycles_completed=self._cycles_completed,
        )

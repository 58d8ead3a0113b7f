"""Feed domain events."""

from datetime import datetime

from newshub.core.domain.events import DomainEvent


class SourceResolvedEvent(DomainEvent):
    """A source produced items and the result was accepted by the store."""

    source_id: str
    sequence: int
    items_count: int
    endpoint: str


class SourceFailedEvent(DomainEvent):
    """A source exhausted every endpoint; the failure was accepted by the store."""

    source_id: str
    sequence: int
    reason: str


class FeedCycleCompletedEvent(DomainEvent):
    """Every source of a full refresh cycle has settled."""

    cycle_id: int
    succeeded: int
    failed: int
    started_at: datetime
    completed_at: datetime

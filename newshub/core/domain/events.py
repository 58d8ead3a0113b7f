"""Domain events infrastructure."""

import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import cast
from uuid import uuid4

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field


class DomainEvent(BaseModel, ABC):
    """Base class for all domain events."""

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    event_version: int = Field(default=1)

    model_config = ConfigDict(frozen=True)

    @property
    def event_type(self) -> str:
        """Return the event type name."""
        return self.__class__.__name__


class DomainEventHandler(ABC):
    """Base class for domain event handlers."""

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """Handle the domain event."""
        pass


HandlerFunc = Callable[[DomainEvent], Awaitable[None] | None]


class FunctionHandler(DomainEventHandler):
    """Adapts a plain (sync or async) callable to a DomainEventHandler."""

    def __init__(self, func: HandlerFunc):
        self.func = func

    async def handle(self, event: DomainEvent) -> None:
        result = self.func(event)
        if inspect.isawaitable(result):
            await cast(Awaitable[None], result)


class EventBus:
    """Event bus for publishing and subscribing to domain events."""

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[DomainEventHandler]] = {}

    def subscribe(
        self, event_type: type[DomainEvent], handler: DomainEventHandler
    ) -> None:
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)
        logger.debug(
            f"Subscribed handler {handler.__class__.__name__} to {event_type.__name__}"
        )

    def subscribe_func(
        self, event_type: type[DomainEvent], func: HandlerFunc
    ) -> DomainEventHandler:
        handler = FunctionHandler(func)
        self.subscribe(event_type, handler)
        return handler

    def unsubscribe(
        self, event_type: type[DomainEvent], handler: DomainEventHandler
    ) -> None:
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
            except ValueError:
                pass

    async def publish(self, event: DomainEvent) -> None:
        event_type = type(event)
        handlers = self._handlers.get(event_type, [])

        logger.debug(f"Publishing event {event.event_type} to {len(handlers)} handlers")

        for handler in handlers:
            try:
                await handler.handle(event)
            except Exception as e:
                logger.error(
                    f"Error handling event {event.event_type} "
                    f"by {handler.__class__.__name__}: {e}"
                )

    def get_handlers_count(self, event_type: type[DomainEvent] | None = None) -> int:
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        return sum(len(handlers) for handlers in self._handlers.values())

"""Process-wide, in-memory domain event bus.

Handlers are registered per ``event_type`` and invoked synchronously, in
registration order, when an event is published. A handler may be a plain
function or a coroutine function; coroutines are scheduled as tasks on the
running loop and the publisher does not wait for them. Handler failures are
logged and never reach the publisher.

There is no persistence, replay, retry or backpressure.
"""

import asyncio
import inspect
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Set, Union

import structlog

from .base import DomainEvent

logger = structlog.get_logger(__name__)

EventHandler = Callable[[Any], Union[None, Awaitable[None]]]


class DomainEventBus:
    """Synchronous dispatcher with fire-and-forget async handlers."""

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._pending: Set[asyncio.Future] = set()

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("Event subscriber added", event_type=event_type)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            logger.debug("Event subscriber removed", event_type=event_type)

    def handler_count(self, event_type: str) -> int:
        return len(self._handlers.get(event_type, []))

    def publish(self, event: DomainEvent) -> int:
        """Dispatch ``event`` to its subscribers.

        Returns:
            int: The number of handlers the event was dispatched to.
        """
        handlers = list(self._handlers.get(event.event_type, []))
        logger.info(
            "Domain event published",
            event_type=event.event_type,
            event_id=event.event_id,
            correlation_id=event.correlation_id,
            causation_id=event.causation_id,
            handlers=len(handlers),
        )
        for handler in handlers:
            try:
                result = handler(event)
            except Exception as exc:
                logger.error(
                    "Domain event handler failed",
                    event_type=event.event_type,
                    event_id=event.event_id,
                    error=str(exc),
                    exc_info=exc,
                )
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._pending.add(task)
                task.add_done_callback(self._on_handler_done)
        return len(handlers)

    def _on_handler_done(self, task: asyncio.Future) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Async domain event handler failed", error=str(exc), exc_info=exc)

    async def drain(self) -> None:
        """Wait until every scheduled handler, including ones they schedule, has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def clear(self) -> None:
        self._handlers.clear()


domain_event_bus = DomainEventBus()

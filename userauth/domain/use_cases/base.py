"""Event-driven command pattern shared by every use case.

A use case is an *operation*: it declares a fixed set of named outputs
(``SUCCESS``, ``ERROR`` and domain specific ones such as ``USER_EXISTS``),
exposes ``execute`` and reports its result by emitting exactly one of those
outputs to the handlers registered on that instance::

    create_user = CreateUser(user_repository, password_hasher)
    create_user.on("SUCCESS", on_created).on("USER_EXISTS", on_conflict)
    await create_user.execute(dto)

Operations can also publish domain events on the process-wide bus and
subscribe to the events other operations publish.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

import structlog

from userauth.domain.events import DomainEvent, DomainEventBus, EventHandler, domain_event_bus

OutputHandler = Callable[[Any], Any]


class OperationError(Exception):
    """Failure payload of the ``ERROR`` output.

    Attributes:
        code: Machine-readable failure code (e.g. ``LOGIN_FAILED``).
        message: Human-readable description.
        details: The underlying exception or extra data, if any.
    """

    def __init__(self, code: str, message: str, details: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def __repr__(self) -> str:
        return f"OperationError(code={self.code!r}, message={self.message!r})"


class AbstractOperation(ABC):
    """Per-instance output handlers plus access to the global event bus."""

    event_bus: DomainEventBus = domain_event_bus

    def __init__(self, output_names: Iterable[str]):
        self.outputs: Dict[str, List[OutputHandler]] = {name: [] for name in output_names}

    def on(self, name: str, handler: OutputHandler) -> "AbstractOperation":
        """Register ``handler`` for the output ``name``.

        Raises:
            ValueError: If the operation does not declare ``name``.
        """
        if name not in self.outputs:
            raise ValueError(f"{type(self).__name__} has no output named '{name}'")
        self.outputs[name].append(handler)
        return self

    def on_typed(self, name: str) -> "asyncio.Future[Any]":
        """Return a future resolved with the first payload emitted as ``name``."""
        future = asyncio.get_running_loop().create_future()

        def _resolve(payload: Any) -> None:
            if not future.done():
                future.set_result(payload)

        self.on(name, _resolve)
        return future

    def emit_output(self, name: str, payload: Any = None) -> bool:
        """Call the handlers of ``name`` in registration order.

        Returns:
            bool: Whether at least one handler was registered.
        """
        handlers = list(self.outputs.get(name, ()))
        for handler in handlers:
            handler(payload)
        return bool(handlers)

    def publish_domain_event(self, event: DomainEvent) -> None:
        self.event_bus.publish(event)

    def subscribe_to(self, event_type: str, handler: EventHandler) -> None:
        self.event_bus.subscribe(event_type, handler)

    def unsubscribe_from(self, event_type: str, handler: EventHandler) -> None:
        self.event_bus.unsubscribe(event_type, handler)

    @abstractmethod
    async def execute(self, *args: Any, **kwargs: Any) -> None:
        raise NotImplementedError


class BaseOperation(AbstractOperation):
    """`AbstractOperation` with logging of success and failure outputs."""

    def __init__(self, output_names: Iterable[str], logger: Optional[Any] = None):
        super().__init__(output_names)
        self.logger = logger or structlog.get_logger(type(self).__module__)

    @property
    def name(self) -> str:
        return type(self).__name__

    def emit_success(self, data: Any) -> bool:
        self.logger.info(f"Operation {self.name} succeeded", operation=self.name)
        return self.emit_output("SUCCESS", data)

    def emit_error(self, error: OperationError) -> bool:
        self.logger.error(
            f"Operation {self.name} failed",
            operation=self.name,
            error_code=error.code,
            error=error.message,
        )
        return self.emit_output("ERROR", error)

    def fail(self, code: str, message: str, exc: BaseException) -> bool:
        """Wrap an unexpected exception and emit it as ``ERROR``."""
        return self.emit_error(OperationError(code, f"{message}: {exc}", exc))


class Bootstrapper(ABC):
    """An operation that wires itself to domain events at startup."""

    @abstractmethod
    def bootstrap(self) -> None:
        raise NotImplementedError


class EventDrivenOperation(BaseOperation, Bootstrapper):
    """Base for operations triggered by domain events.

    Handler failures are logged as ``EVENT_HANDLER_FAILED`` and never
    propagate to the publisher.
    """

    def subscribe_guarded(
        self, event_type: str, handler: Callable[[Any], Awaitable[None]]
    ) -> EventHandler:
        async def _handle(event: DomainEvent) -> None:
            try:
                await handler(event)
            except Exception as exc:
                error = OperationError(
                    "EVENT_HANDLER_FAILED",
                    f"Error handling {event_type} event in {self.name}",
                    exc,
                )
                self.logger.error(
                    error.message,
                    error_code=error.code,
                    event_id=event.event_id,
                    correlation_id=event.correlation_id,
                    error=str(exc),
                )

        self.subscribe_to(event_type, _handle)
        return _handle

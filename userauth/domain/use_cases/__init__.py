"""Application use cases, each implemented as an event-emitting operation."""

from .base import AbstractOperation, BaseOperation, Bootstrapper, EventDrivenOperation, OperationError

__all__ = [
    "OperationError",
    "AbstractOperation",
    "BaseOperation",
    "Bootstrapper",
    "EventDrivenOperation",
]

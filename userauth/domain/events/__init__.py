"""Domain events and the in-process event bus.

Event types and their bus keys:

- ``UserCreatedEvent``    -> ``"UserCreated"``
- ``UserDeletedEvent``    -> ``"UserDeleted"``
- ``TokenCreatedEvent``   -> ``"TokenCreated"``
- ``ForgotPasswordEvent`` -> ``"ForgotPassword"``
"""

from .auth_events import ForgotPasswordEvent
from .base import DomainEvent, EventMetadata
from .bus import DomainEventBus, EventHandler, domain_event_bus
from .token_events import TokenCreatedEvent
from .user_events import UserCreatedEvent, UserDeletedEvent

__all__ = [
    "DomainEvent",
    "EventMetadata",
    "DomainEventBus",
    "EventHandler",
    "domain_event_bus",
    "UserCreatedEvent",
    "UserDeletedEvent",
    "TokenCreatedEvent",
    "ForgotPasswordEvent",
]

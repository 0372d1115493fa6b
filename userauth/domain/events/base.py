"""Base types for domain events.

Domain events are immutable notifications published after a state change.
Every event carries an `EventMetadata` block so that a chain of reactions
(user created -> verification token created -> verification email sent) can be
traced: children keep the parent's ``correlation_id`` and point at the
parent's ``event_id`` through ``causation_id``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class EventMetadata:
    """Traceability data attached to every domain event.

    Attributes:
        event_id: Unique id of this event (uuid4).
        correlation_id: Id shared by every event of one causal chain.
            Defaults to ``event_id`` for the root of a chain.
        causation_id: ``event_id`` of the event that caused this one.
        timestamp: When the event was created (UTC).
        actor: Who triggered the event.
        context: Free-form extra data.
    """

    event_id: str = field(default_factory=lambda: str(uuid4()))
    correlation_id: Optional[str] = None
    causation_id: Optional[str] = None
    timestamp: datetime = field(default_factory=_utc_now)
    actor: str = "system"
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.correlation_id is None:
            object.__setattr__(self, "correlation_id", self.event_id)
        if not self.timestamp.tzinfo:
            object.__setattr__(self, "timestamp", self.timestamp.replace(tzinfo=timezone.utc))


@dataclass(frozen=True)
class DomainEvent(ABC):
    """Base class for all domain events.

    Subclasses add their payload fields and implement `event_type`, the key
    subscribers register under on the event bus.
    """

    metadata: EventMetadata = field(default_factory=EventMetadata, kw_only=True)

    @property
    @abstractmethod
    def event_type(self) -> str:
        raise NotImplementedError

    @property
    def event_id(self) -> str:
        return self.metadata.event_id

    @property
    def correlation_id(self) -> Optional[str]:
        return self.metadata.correlation_id

    @property
    def causation_id(self) -> Optional[str]:
        return self.metadata.causation_id

    @property
    def timestamp(self) -> datetime:
        return self.metadata.timestamp

    @property
    def actor(self) -> str:
        return self.metadata.actor

    def create_child_event_options(self, actor: Optional[str] = None) -> Dict[str, Any]:
        """Metadata options for an event caused by this one."""
        return {
            "correlation_id": self.metadata.correlation_id,
            "causation_id": self.metadata.event_id,
            "actor": actor or self.metadata.actor,
        }

    def child_metadata(self, actor: Optional[str] = None) -> EventMetadata:
        return EventMetadata(**self.create_child_event_options(actor))

"""User lifecycle domain events."""

from dataclasses import dataclass

from userauth.domain.dtos.output import UserResponseDTO

from .base import DomainEvent


@dataclass(frozen=True)
class UserCreatedEvent(DomainEvent):
    """Published after a user registers. Triggers verification token creation."""

    user: UserResponseDTO

    @property
    def event_type(self) -> str:
        return "UserCreated"


@dataclass(frozen=True)
class UserDeletedEvent(DomainEvent):
    """Published just before a user is deleted. Triggers token cleanup."""

    user_id: str

    @property
    def event_type(self) -> str:
        return "UserDeleted"

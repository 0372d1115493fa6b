"""Token domain events."""

from dataclasses import dataclass

from userauth.domain.dtos.output import UserResponseDTO

from .base import DomainEvent


@dataclass(frozen=True)
class TokenCreatedEvent(DomainEvent):
    """Published once a verification token exists for a new user.

    Consumed by the verification email sender.
    """

    user: UserResponseDTO

    @property
    def event_type(self) -> str:
        return "TokenCreated"

"""Authentication domain events."""

from dataclasses import dataclass

from userauth.domain.dtos.output import TokenResponseDTO, UserResponseDTO

from .base import DomainEvent


@dataclass(frozen=True)
class ForgotPasswordEvent(DomainEvent):
    """Published when a password reset token has been issued.

    Attributes:
        user: The user who asked for the reset.
        token: The stored reset token, whose value goes into the emailed link.
    """

    user: UserResponseDTO
    token: TokenResponseDTO

    @property
    def event_type(self) -> str:
        return "ForgotPassword"

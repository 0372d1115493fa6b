"""Domain interfaces for dependency inversion.

Operations depend on these abstractions; infrastructure provides the
MongoDB, Redis, bcrypt, JWT and SMTP adapters.
"""

from .repositories import ITokenRepository, IUserRepository
from .services import (
    IEmailService,
    IJWTTokenGenerator,
    IPasswordHasher,
    ITokenBlackList,
    ITokenGenerator,
)

__all__ = [
    "IUserRepository",
    "ITokenRepository",
    "IPasswordHasher",
    "IJWTTokenGenerator",
    "ITokenGenerator",
    "ITokenBlackList",
    "IEmailService",
]

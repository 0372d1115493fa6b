"""Export domain entities and their enumerations for use across the application."""

from .token import Token, TokenType
from .user import Gender, User, UserRole

__all__ = ["User", "UserRole", "Gender", "Token", "TokenType"]

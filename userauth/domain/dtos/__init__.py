"""Data transfer objects: validated inputs and serializable outputs."""

from .auth import AuthenticateUserDTO, EmailUserDTO, LogoutRequestDTO, ResetPasswordDTO
from .base import BaseDTO
from .output import PaginationDTO, TokenResponseDTO, UserResponseDTO
from .token import CreateTokenDTO, UpdateTokenDTO
from .user import CreateUserDTO, GetAllUsersInputDTO, GetUserInputDTO, UpdateUserDTO

__all__ = [
    "BaseDTO",
    "CreateUserDTO",
    "UpdateUserDTO",
    "GetUserInputDTO",
    "GetAllUsersInputDTO",
    "AuthenticateUserDTO",
    "EmailUserDTO",
    "LogoutRequestDTO",
    "ResetPasswordDTO",
    "CreateTokenDTO",
    "UpdateTokenDTO",
    "UserResponseDTO",
    "TokenResponseDTO",
    "PaginationDTO",
]

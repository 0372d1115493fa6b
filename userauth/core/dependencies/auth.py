from __future__ import annotations

from typing import Annotated, Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from structlog import get_logger

from userauth.core.exceptions import AuthenticationError, PermissionError
from userauth.domain.entities import TokenType, User, UserRole
from userauth.domain.interfaces import IJWTTokenGenerator, ITokenBlackList, IUserRepository
from userauth.infrastructure.dependency_injection.dependencies import (
    get_jwt_token_generator,
    get_token_blacklist,
    get_user_repository,
)

__all__ = [
    "get_bearer_token",
    "get_current_user",
    "require_roles",
    "CurrentUser",
]

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Type-annotated dependency shortcuts
# ---------------------------------------------------------------------------

bearer_scheme = HTTPBearer(auto_error=False)

Credentials = Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]
BlackList = Annotated[ITokenBlackList, Depends(get_token_blacklist)]
JWTGenerator = Annotated[IJWTTokenGenerator, Depends(get_jwt_token_generator)]
UserRepository = Annotated[IUserRepository, Depends(get_user_repository)]


# ---------------------------------------------------------------------------
# Public dependencies
# ---------------------------------------------------------------------------


def get_bearer_token(credentials: Credentials) -> Optional[str]:
    """The raw token from ``Authorization: Bearer <token>``, if any."""
    return credentials.credentials if credentials else None


async def get_current_user(
    request: Request,
    token: Annotated[Optional[str], Depends(get_bearer_token)],
    blacklist: BlackList,
    jwt_generator: JWTGenerator,
    user_repository: UserRepository,
) -> User:
    """Return the authenticated :class:`~userauth.domain.entities.user.User`.

    Checks, in order: a bearer token is present, it has not been revoked by
    a logout, it is a valid ACCESS JWT, and its ``userId`` still exists.
    No role checks happen here, see :func:`require_roles`.
    """
    if not token:
        raise AuthenticationError("No token provided", code="token_missing")

    if await blacklist.is_blacklisted(token):
        logger.warning("Revoked token used", path=request.url.path)
        raise AuthenticationError("Token has been revoked", code="token_revoked")

    payload = jwt_generator.validate(token, TokenType.ACCESS)
    user_id = payload.get("userId") if payload else None
    if not user_id:
        raise AuthenticationError("Unauthorized access", code="token_invalid")

    user = await user_repository.find_by_id(user_id)
    if user is None:
        raise AuthenticationError("Unauthorized access", code="user_not_found")

    request.state.user = user
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """Build a dependency admitting only users whose role is in ``roles``.

    Example:
        ``@router.delete("/{id}", dependencies=[Depends(require_roles(UserRole.ADMIN))])``
    """
    allowed = frozenset(roles)

    def check_role(current_user: CurrentUser) -> User:
        if current_user.role not in allowed:
            raise PermissionError("Insufficient permissions", code="insufficient_permissions")
        return current_user

    return check_role

"""FastAPI dependencies resolving from the application container.

Every factory takes the container through `get_container`, so tests can
swap the whole object graph with a single ``app.dependency_overrides`` entry.
"""

from typing import Annotated

from fastapi import Depends, Request

from userauth.core.exceptions import ConfigurationError
from userauth.domain.interfaces import (
    IJWTTokenGenerator,
    IPasswordHasher,
    ITokenBlackList,
    ITokenRepository,
    IUserRepository,
)
from userauth.domain.use_cases.auth import ForgotPassword, LoginUser, LogoutUser, ResetPassword, VerifyEmail
from userauth.domain.use_cases.notification import SendEmailOnUserCreation
from userauth.domain.use_cases.user import CreateUser, DeleteUser, GetAllUsers, GetUser, UpdateUser

from .container import Container


def get_container(request: Request) -> Container:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise ConfigurationError("Dependency container is not initialized", code="container_missing")
    return container


AppContainer = Annotated[Container, Depends(get_container)]

# ---------------------------------------------------------------------------
# Infrastructure Layer Dependencies
# ---------------------------------------------------------------------------


def get_user_repository(container: AppContainer) -> IUserRepository:
    return container.user_repository


def get_token_repository(container: AppContainer) -> ITokenRepository:
    return container.token_repository


def get_password_hasher(container: AppContainer) -> IPasswordHasher:
    return container.password_hasher


def get_jwt_token_generator(container: AppContainer) -> IJWTTokenGenerator:
    return container.jwt_token_generator


def get_token_blacklist(container: AppContainer) -> ITokenBlackList:
    return container.token_blacklist


UserRepository = Annotated[IUserRepository, Depends(get_user_repository)]
TokenRepository = Annotated[ITokenRepository, Depends(get_token_repository)]
Hasher = Annotated[IPasswordHasher, Depends(get_password_hasher)]

# ---------------------------------------------------------------------------
# Operations (a fresh instance per request, handlers are per instance)
# ---------------------------------------------------------------------------


def get_create_user(users: UserRepository, hasher: Hasher) -> CreateUser:
    return CreateUser(users, hasher)


def get_get_user(users: UserRepository) -> GetUser:
    return GetUser(users)


def get_get_all_users(users: UserRepository) -> GetAllUsers:
    return GetAllUsers(users)


def get_update_user(users: UserRepository, hasher: Hasher) -> UpdateUser:
    return UpdateUser(users, hasher)


def get_delete_user(users: UserRepository) -> DeleteUser:
    return DeleteUser(users)


def get_login_user(container: AppContainer) -> LoginUser:
    return LoginUser(
        container.user_repository,
        container.password_hasher,
        container.jwt_token_generator,
        container.settings,
    )


def get_logout_user(container: AppContainer) -> LogoutUser:
    return LogoutUser(container.token_blacklist, container.jwt_token_generator, container.settings)


def get_verify_email(tokens: TokenRepository, users: UserRepository) -> VerifyEmail:
    return VerifyEmail(tokens, users)


def get_forgot_password(container: AppContainer) -> ForgotPassword:
    return ForgotPassword(
        container.user_repository,
        container.token_repository,
        container.token_generator,
        container.settings,
    )


def get_reset_password(tokens: TokenRepository, users: UserRepository, hasher: Hasher) -> ResetPassword:
    return ResetPassword(tokens, users, hasher)


def get_send_verification_email(container: AppContainer) -> SendEmailOnUserCreation:
    return SendEmailOnUserCreation(
        container.user_repository,
        container.token_repository,
        container.email_service,
        container.settings,
    )

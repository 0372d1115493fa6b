import os

# Settings are read at import time, so the environment must be in place first
os.environ["APP_ENV"] = "test"
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017/userauth_test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("EMAIL_TEST_MODE", "true")

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tests.factories.user import create_fake_user
from tests.utils import bearer_for
from userauth.core.config.settings import settings
from userauth.domain.entities import UserRole
from userauth.domain.events import DomainEventBus
from userauth.domain.interfaces import (
    IEmailService,
    IJWTTokenGenerator,
    IPasswordHasher,
    ITokenBlackList,
    ITokenGenerator,
    ITokenRepository,
    IUserRepository,
)
from userauth.domain.use_cases import AbstractOperation
from userauth.infrastructure.services import JWTTokenGenerator


@pytest.fixture(autouse=True)
def event_bus(monkeypatch):
    """A fresh event bus per test so subscriptions never leak between tests."""
    bus = DomainEventBus()
    monkeypatch.setattr(AbstractOperation, "event_bus", bus)
    return bus


@pytest.fixture
def user_repository():
    return AsyncMock(spec=IUserRepository)


@pytest.fixture
def token_repository():
    return AsyncMock(spec=ITokenRepository)


@pytest.fixture
def password_hasher():
    hasher = MagicMock(spec=IPasswordHasher)
    hasher.hash.side_effect = lambda password: f"hashed:{password}"
    hasher.compare.side_effect = lambda password, hashed: hashed == f"hashed:{password}"
    return hasher


@pytest.fixture
def jwt_token_generator():
    return MagicMock(spec=IJWTTokenGenerator)


@pytest.fixture
def token_generator():
    generator = MagicMock(spec=ITokenGenerator)
    generator.generate.return_value = "opaque-token"
    return generator


@pytest.fixture
def token_blacklist():
    blacklist = AsyncMock(spec=ITokenBlackList)
    blacklist.is_blacklisted.return_value = False
    return blacklist


@pytest.fixture
def email_service():
    service = AsyncMock(spec=IEmailService)
    service.verify.return_value = True
    return service


@pytest.fixture
def container(
    event_bus,
    user_repository,
    token_repository,
    password_hasher,
    token_generator,
    token_blacklist,
    email_service,
):
    """Stand-in for the dependency container, with a real JWT generator so
    endpoint tests can sign working access tokens."""
    return SimpleNamespace(
        settings=settings,
        event_bus=event_bus,
        database=MagicMock(),
        redis=AsyncMock(),
        user_repository=user_repository,
        token_repository=token_repository,
        password_hasher=password_hasher,
        jwt_token_generator=JWTTokenGenerator(settings),
        token_generator=token_generator,
        token_blacklist=token_blacklist,
        email_service=email_service,
    )


@pytest.fixture
def app(container):
    from userauth.core.application import create_application

    application = create_application()
    application.state.container = container
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def admin():
    return create_fake_user(role=UserRole.ADMIN)


@pytest.fixture
def member():
    return create_fake_user(role=UserRole.USER)


@pytest.fixture
def admin_headers(container, admin, user_repository):
    user_repository.find_by_id.return_value = admin
    return bearer_for(container, admin)


@pytest.fixture
def member_headers(container, member, user_repository):
    user_repository.find_by_id.return_value = member
    return bearer_for(container, member)

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from tests.factories.token import create_fake_token
from tests.factories.user import create_fake_user
from userauth.core.config.settings import settings
from userauth.core.exceptions import ConfigurationError
from userauth.domain.dtos import UserResponseDTO
from userauth.domain.events import DomainEventBus, UserCreatedEvent, UserDeletedEvent
from userauth.domain.use_cases import AbstractOperation
from userauth.infrastructure.dependency_injection.bootstrap import BootstrapperRunner
from userauth.infrastructure.dependency_injection.container import Container
from userauth.infrastructure.dependency_injection.dependencies import get_container


class TestBootstrapperRunner:
    def test_subscribes_every_event_driven_operation_once(self, container, event_bus):
        runner = BootstrapperRunner(container)

        runner.run()
        runner.run()

        for event_type in ("UserCreated", "UserDeleted", "TokenCreated", "ForgotPassword"):
            assert event_bus.handler_count(event_type) == 1

    @pytest.mark.asyncio
    async def test_registration_chain_sends_the_verification_email(
        self, container, event_bus, user_repository, token_repository, email_service
    ):
        # Arrange
        user = create_fake_user(is_verified=False)
        token = create_fake_token(user_id=user.id, token="opaque-token")
        token_repository.create.return_value = token
        token_repository.find_by_user_id.return_value = [token]
        user_repository.find_by_email.return_value = user
        BootstrapperRunner(container).run()

        # Act
        event_bus.publish(UserCreatedEvent(user=UserResponseDTO.from_entity(user)))
        await event_bus.drain()

        # Assert
        token_repository.create.assert_awaited_once()
        email_service.send_email.assert_awaited_once()
        assert email_service.send_email.await_args.kwargs["context"]["verification_url"].endswith(
            "/auth/verify-email?token=opaque-token"
        )

    @pytest.mark.asyncio
    async def test_user_deletion_removes_tokens(self, container, event_bus, token_repository):
        tokens = [create_fake_token(user_id="u1"), create_fake_token(user_id="u1")]
        token_repository.find_by_user_id.return_value = tokens
        BootstrapperRunner(container).run()

        event_bus.publish(UserDeletedEvent(user_id="u1"))
        await event_bus.drain()

        assert token_repository.delete.await_count == 2

    @pytest.mark.asyncio
    async def test_failing_chain_never_reaches_the_publisher(
        self, container, event_bus, token_repository, email_service
    ):
        token_repository.create.side_effect = RuntimeError("mongo down")
        BootstrapperRunner(container).run()

        event_bus.publish(UserCreatedEvent(user=UserResponseDTO.from_entity(create_fake_user())))
        await event_bus.drain()

        email_service.send_email.assert_not_awaited()


class TestContainer:
    def test_wires_repositories_to_the_configured_database(self, event_bus):
        mongo_client = MagicMock()

        container = Container(settings, mongo_client=mongo_client, redis=AsyncMock(), event_bus=event_bus)

        mongo_client.__getitem__.assert_called_once_with(settings.MONGODB_DB)
        assert container.user_repository.collection_name == "users"
        assert container.token_repository.collection_name == "tokens"
        assert container.token_blacklist.redis is container.redis

    @pytest.mark.asyncio
    async def test_startup_waits_for_mongo_and_creates_indexes(self, event_bus):
        container = Container(settings, mongo_client=MagicMock(), redis=AsyncMock(), event_bus=event_bus)

        with patch(
            "userauth.infrastructure.dependency_injection.container.wait_for_database", new=AsyncMock()
        ) as wait, patch(
            "userauth.infrastructure.dependency_injection.container.ensure_indexes", new=AsyncMock()
        ) as ensure:
            await container.startup()

        wait.assert_awaited_once_with(container.database)
        ensure.assert_awaited_once_with(container.database)

    @pytest.mark.asyncio
    async def test_shutdown_closes_clients(self, event_bus):
        mongo_client = MagicMock()
        redis = AsyncMock()
        container = Container(settings, mongo_client=mongo_client, redis=redis, event_bus=event_bus)
        event_bus.subscribe("UserCreated", lambda event: None)

        await container.shutdown()

        mongo_client.close.assert_called_once()
        redis.aclose.assert_awaited_once()
        assert event_bus.handler_count("UserCreated") == 0


class TestGetContainer:
    def test_resolves_from_app_state(self):
        container = object()
        request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(container=container)))

        assert get_container(request) is container

    def test_missing_container_is_a_configuration_error(self):
        request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))

        with pytest.raises(ConfigurationError):
            get_container(request)


class TestContainerEventBus:
    def test_defaults_to_the_bus_operations_use(self, event_bus):
        container = Container(settings, mongo_client=MagicMock(), redis=AsyncMock())

        assert container.event_bus is event_bus

    @pytest.mark.asyncio
    async def test_custom_bus_is_the_one_operations_publish_to(self, token_repository, token_generator):
        bus = DomainEventBus()
        container = Container(settings, mongo_client=MagicMock(), redis=AsyncMock(), event_bus=bus)
        container.token_repository = token_repository
        container.token_generator = token_generator
        token_repository.create.return_value = create_fake_token()
        BootstrapperRunner(container).run()

        bus.publish(UserCreatedEvent(user=UserResponseDTO.from_entity(create_fake_user())))
        await container.shutdown()

        assert AbstractOperation.event_bus is bus
        token_repository.create.assert_awaited_once()

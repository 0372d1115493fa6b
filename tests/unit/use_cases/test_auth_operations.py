from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import call

import pytest

from tests.factories.token import create_fake_token
from tests.factories.user import VALID_PASSWORD, create_fake_user
from tests.utils import capture, emitted
from userauth.domain.dtos import AuthenticateUserDTO, EmailUserDTO, LogoutRequestDTO, ResetPasswordDTO
from userauth.domain.entities import TokenType
from userauth.domain.use_cases.auth import ForgotPassword, LoginUser, LogoutUser, ResetPassword, VerifyEmail

config = SimpleNamespace(
    ACCESS_TOKEN_TTL_SECONDS=1800,
    REFRESH_TOKEN_TTL_SECONDS=2592000,
    JWT_RESET_PASSWORD_EXPIRATION_MINUTES=10,
)


class TestLoginUser:
    @pytest.fixture
    def login(self, user_repository, password_hasher, jwt_token_generator):
        jwt_token_generator.generate.side_effect = lambda payload, token_type, ttl: f"{token_type.value}-jwt"
        return LoginUser(user_repository, password_hasher, jwt_token_generator, config)

    @pytest.mark.asyncio
    async def test_issues_access_and_refresh_tokens(self, login, user_repository, jwt_token_generator):
        # Arrange
        user = create_fake_user(password=f"hashed:{VALID_PASSWORD}")
        user_repository.find_by_email_with_password.return_value = user
        received = capture(login)
        before = datetime.now(timezone.utc)

        # Act
        await login.execute(AuthenticateUserDTO(email=user.email, password=VALID_PASSWORD))

        # Assert
        (result,) = received["SUCCESS"]
        assert result["user_id"] == user.id
        assert result["access_token"] == "ACCESS-jwt"
        assert result["refresh_token"] == "REFRESH-jwt"
        assert result["access_token_expires"] >= before + timedelta(seconds=1800)
        assert result["refresh_token_expires"] > result["access_token_expires"]
        assert jwt_token_generator.generate.call_args_list == [
            call({"userId": user.id, "email": user.email, "role": "user"}, TokenType.ACCESS, 1800),
            call({"userId": user.id}, TokenType.REFRESH, 2592000),
        ]

    @pytest.mark.asyncio
    async def test_unknown_email(self, login, user_repository):
        user_repository.find_by_email_with_password.return_value = None
        received = capture(login)

        await login.execute(AuthenticateUserDTO(email="ghost@example.com", password="x"))

        assert emitted(received) == ["USER_NOT_FOUND"]

    @pytest.mark.asyncio
    async def test_wrong_password(self, login, user_repository, jwt_token_generator):
        user = create_fake_user(password=f"hashed:{VALID_PASSWORD}")
        user_repository.find_by_email_with_password.return_value = user
        received = capture(login)

        await login.execute(AuthenticateUserDTO(email=user.email, password="wrong"))

        assert received["INVALID_CREDENTIALS"] == ["Invalid email or password."]
        jwt_token_generator.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_password_is_checked_before_verification(self, login, user_repository):
        user = create_fake_user(password=f"hashed:{VALID_PASSWORD}", is_verified=False)
        user_repository.find_by_email_with_password.return_value = user
        received = capture(login)

        await login.execute(AuthenticateUserDTO(email=user.email, password="wrong"))

        assert emitted(received) == ["INVALID_CREDENTIALS"]

    @pytest.mark.asyncio
    async def test_unverified_account(self, login, user_repository, jwt_token_generator):
        user = create_fake_user(password=f"hashed:{VALID_PASSWORD}", is_verified=False)
        user_repository.find_by_email_with_password.return_value = user
        received = capture(login)

        await login.execute(AuthenticateUserDTO(email=user.email, password=VALID_PASSWORD))

        assert received["ACCOUNT_NOT_VERIFIED"] == ["Please verify your email before logging in."]
        jwt_token_generator.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_error(self, login, user_repository):
        user_repository.find_by_email_with_password.side_effect = RuntimeError("boom")
        received = capture(login)

        await login.execute(AuthenticateUserDTO(email="a@example.com", password="x"))

        assert received["ERROR"][0].code == "LOGIN_FAILED"


class TestLogoutUser:
    @pytest.fixture
    def operation(self, token_blacklist, jwt_token_generator):
        jwt_token_generator.validate.return_value = {"userId": "u1", "tokenType": "REFRESH"}
        return LogoutUser(token_blacklist, jwt_token_generator, config)

    @pytest.mark.asyncio
    async def test_blacklists_both_tokens_for_their_lifetime(self, operation, token_blacklist, jwt_token_generator):
        received = capture(operation)

        await operation.execute(LogoutRequestDTO(access_token="a.b.c", refresh_token="refresh"), user_id="u1")

        assert received["SUCCESS"] == [{"message": "Successfully logged out."}]
        jwt_token_generator.validate.assert_called_once_with("refresh", TokenType.REFRESH)
        token_blacklist.add.assert_has_awaits([call("a.b.c", 1800), call("refresh", 2592000)], any_order=True)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tokens", [{"access_token": "a.b.c"}, {"refresh_token": "r"}, {}])
    async def test_missing_token(self, operation, token_blacklist, tokens):
        received = capture(operation)

        await operation.execute(LogoutRequestDTO(**tokens))

        assert received["INVALID_TOKEN"] == ["Invalid or missing tokens provided."]
        token_blacklist.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_refresh_token(self, operation, token_blacklist, jwt_token_generator):
        jwt_token_generator.validate.return_value = None
        received = capture(operation)

        await operation.execute(LogoutRequestDTO(access_token="a.b.c", refresh_token="forged"), user_id="u1")

        assert emitted(received) == ["INVALID_TOKEN"]
        token_blacklist.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_refresh_token_of_another_user(self, operation, token_blacklist):
        received = capture(operation)

        await operation.execute(LogoutRequestDTO(access_token="a.b.c", refresh_token="refresh"), user_id="u2")

        assert emitted(received) == ["INVALID_TOKEN"]
        token_blacklist.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blacklist_failure(self, operation, token_blacklist):
        token_blacklist.add.side_effect = ConnectionError("redis down")
        received = capture(operation)

        await operation.execute(LogoutRequestDTO(access_token="a.b.c", refresh_token="refresh"), user_id="u1")

        assert emitted(received) == ["ERROR"]
        assert received["ERROR"][0].code == "LOGOUT_FAILED"


class TestVerifyEmail:
    @pytest.fixture
    def operation(self, token_repository, user_repository):
        return VerifyEmail(token_repository, user_repository)

    @pytest.mark.asyncio
    async def test_verifies_and_consumes_the_token(self, operation, token_repository, user_repository):
        # Arrange
        user = create_fake_user(is_verified=False)
        token = create_fake_token(user_id=user.id)
        token_repository.find_by_token.return_value = token
        user_repository.find_by_id.return_value = user
        received = capture(operation)

        # Act
        await operation.execute(token.token)

        # Assert
        assert received["SUCCESS"] == [{"user_id": user.id}]
        user_repository.update.assert_awaited_once_with(user.id, {"is_verified": True})
        token_repository.delete.assert_awaited_once_with(token.id)

    @pytest.mark.asyncio
    async def test_unknown_token(self, operation, token_repository):
        token_repository.find_by_token.return_value = None
        received = capture(operation)

        await operation.execute("nope")

        assert emitted(received) == ["TOKEN_NOT_FOUND"]
        token_repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_token_of_another_type_is_ignored(self, operation, token_repository):
        token_repository.find_by_token.return_value = create_fake_token(type=TokenType.RESET_PASSWORD)
        received = capture(operation)

        await operation.execute("reset")

        assert emitted(received) == ["TOKEN_NOT_FOUND"]
        token_repository.delete.assert_not_awaited()

    def test_declares_only_the_outcomes_it_emits(self, operation):
        assert set(operation.outputs) == {
            "SUCCESS",
            "ERROR",
            "TOKEN_NOT_FOUND",
            "USER_NOT_FOUND",
            "TOKEN_EXPIRED",
            "ALREADY_VERIFIED",
        }
        with pytest.raises(ValueError):
            operation.on("INVALID_TOKEN", lambda _: None)

    @pytest.mark.asyncio
    async def test_expired_token_is_deleted(self, operation, token_repository, user_repository):
        token = create_fake_token(expires_in=timedelta(seconds=-1))
        token_repository.find_by_token.return_value = token
        received = capture(operation)

        await operation.execute(token.token)

        assert emitted(received) == ["TOKEN_EXPIRED"]
        token_repository.delete.assert_awaited_once_with(token.id)
        user_repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_orphaned_token(self, operation, token_repository, user_repository):
        token = create_fake_token()
        token_repository.find_by_token.return_value = token
        user_repository.find_by_id.return_value = None
        received = capture(operation)

        await operation.execute(token.token)

        assert emitted(received) == ["USER_NOT_FOUND"]
        token_repository.delete.assert_awaited_once_with(token.id)

    @pytest.mark.asyncio
    async def test_already_verified(self, operation, token_repository, user_repository):
        user = create_fake_user(is_verified=True)
        token = create_fake_token(user_id=user.id)
        token_repository.find_by_token.return_value = token
        user_repository.find_by_id.return_value = user
        received = capture(operation)

        await operation.execute(token.token)

        assert received["ALREADY_VERIFIED"] == [{"user_id": user.id}]
        user_repository.update.assert_not_awaited()
        token_repository.delete.assert_awaited_once_with(token.id)

    @pytest.mark.asyncio
    async def test_error(self, operation, token_repository):
        token_repository.find_by_token.side_effect = RuntimeError("boom")
        received = capture(operation)

        await operation.execute("x")

        assert received["ERROR"][0].code == "EMAIL_VERIFICATION_FAILED"


class TestForgotPassword:
    @pytest.fixture
    def operation(self, user_repository, token_repository, token_generator):
        return ForgotPassword(user_repository, token_repository, token_generator, config)

    @pytest.mark.asyncio
    async def test_stores_reset_token_and_publishes(
        self, operation, user_repository, token_repository, event_bus
    ):
        # Arrange
        user = create_fake_user()
        stored = create_fake_token(user_id=user.id, token="opaque-token", type=TokenType.RESET_PASSWORD)
        user_repository.find_by_email.return_value = user
        token_repository.create.return_value = stored
        published = []
        event_bus.subscribe("ForgotPassword", published.append)
        received = capture(operation)
        before = datetime.now(timezone.utc)

        # Act
        await operation.execute(EmailUserDTO(email=user.email))

        # Assert
        assert received["SUCCESS"] == [{"message": "Password reset link sent to your email"}]
        created = token_repository.create.call_args.args[0]
        assert created.type == TokenType.RESET_PASSWORD
        assert created.token == "opaque-token"
        assert created.user_id == user.id
        assert before + timedelta(minutes=10) <= created.expires_at <= datetime.now(timezone.utc) + timedelta(minutes=10)
        (event,) = published
        assert event.user.id == user.id
        assert event.token.token == "opaque-token"

    @pytest.mark.asyncio
    async def test_unknown_email(self, operation, user_repository, token_repository):
        user_repository.find_by_email.return_value = None
        received = capture(operation)

        await operation.execute(EmailUserDTO(email="ghost@example.com"))

        assert emitted(received) == ["USER_NOT_FOUND"]
        token_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unverified_account(self, operation, user_repository, token_repository):
        user_repository.find_by_email.return_value = create_fake_user(is_verified=False)
        received = capture(operation)

        await operation.execute(EmailUserDTO(email="someone@example.com"))

        assert emitted(received) == ["ACCOUNT_NOT_VERIFIED"]
        token_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_error(self, operation, user_repository):
        user_repository.find_by_email.side_effect = RuntimeError("boom")
        received = capture(operation)

        await operation.execute(EmailUserDTO(email="someone@example.com"))

        assert received["ERROR"][0].code == "FORGOT_PASSWORD_FAILED"


class TestResetPassword:
    @pytest.fixture
    def operation(self, token_repository, user_repository, password_hasher):
        return ResetPassword(token_repository, user_repository, password_hasher)

    @staticmethod
    def request(token="reset-token"):
        return ResetPasswordDTO.validate_data({"token": token, "password": "N3wP@ssword"})

    @pytest.mark.asyncio
    async def test_resets_password_and_consumes_token(self, operation, token_repository, user_repository):
        # Arrange
        user = create_fake_user()
        token = create_fake_token(user_id=user.id, token="reset-token", type=TokenType.RESET_PASSWORD)
        token_repository.find_by_token.return_value = token
        user_repository.find_by_id.return_value = user
        received = capture(operation)

        # Act
        await operation.execute(self.request())

        # Assert
        assert received["SUCCESS"] == [
            {"message": "Password has been reset successfully.", "user_id": user.id}
        ]
        user_repository.update.assert_awaited_once_with(user.id, {"password": "hashed:N3wP@ssword"})
        token_repository.delete.assert_awaited_once_with(token.id)

    @pytest.mark.asyncio
    async def test_unknown_token(self, operation, token_repository):
        token_repository.find_by_token.return_value = None
        received = capture(operation)

        await operation.execute(self.request())

        assert emitted(received) == ["TOKEN_NOT_FOUND"]

    @pytest.mark.asyncio
    async def test_verification_token_is_rejected(self, operation, token_repository, user_repository):
        token_repository.find_by_token.return_value = create_fake_token(type=TokenType.VERIFICATION)
        received = capture(operation)

        await operation.execute(self.request())

        assert emitted(received) == ["INVALID_TOKEN"]
        user_repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_token_is_deleted(self, operation, token_repository, user_repository):
        token = create_fake_token(type=TokenType.RESET_PASSWORD, expires_in=timedelta(minutes=-1))
        token_repository.find_by_token.return_value = token
        received = capture(operation)

        await operation.execute(self.request())

        assert emitted(received) == ["TOKEN_EXPIRED"]
        token_repository.delete.assert_awaited_once_with(token.id)
        user_repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_orphaned_token(self, operation, token_repository, user_repository):
        token_repository.find_by_token.return_value = create_fake_token(type=TokenType.RESET_PASSWORD)
        user_repository.find_by_id.return_value = None
        received = capture(operation)

        await operation.execute(self.request())

        assert emitted(received) == ["INVALID_TOKEN"]

    @pytest.mark.asyncio
    async def test_error(self, operation, token_repository):
        token_repository.find_by_token.side_effect = RuntimeError("boom")
        received = capture(operation)

        await operation.execute(self.request())

        assert received["ERROR"][0].code == "RESET_PASSWORD_FAILED"

import pytest
from pydantic import ValidationError

from userauth.core.config.settings import Settings

BASE = {
    "MONGODB_URL": "mongodb://localhost:27017/userauth_test",
    "JWT_SECRET": "a-secret-that-is-long-enough-for-the-tests",
}


def make_settings(**overrides):
    return Settings(_env_file=None, **{**BASE, **overrides})


class TestSettings:
    def test_database_name_comes_from_the_url(self):
        assert make_settings().MONGODB_DB == "userauth_test"

    def test_database_name_defaults_when_url_has_no_path(self):
        assert make_settings(MONGODB_URL="mongodb://db:27017").MONGODB_DB == "userauth"

    def test_mongodb_url_scheme_is_checked(self):
        with pytest.raises(ValidationError):
            make_settings(MONGODB_URL="postgres://localhost/db")

    def test_redis_password_required_in_production(self):
        with pytest.raises(ValidationError):
            make_settings(APP_ENV="production", REDIS_PASSWORD="", EMAIL_TEST_MODE=True)

    def test_redis_url_is_assembled(self):
        config = make_settings(REDIS_HOST="cache", REDIS_PORT=6380, REDIS_PASSWORD="pw", REDIS_DB=2)

        assert config.REDIS_URL == "redis://:pw@cache:6380/2"
        assert config.RATE_LIMIT_STORAGE_URL == config.REDIS_URL

    def test_empty_jwt_secret_is_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(JWT_SECRET="")

    @pytest.mark.parametrize("value", ["100", "0/minute", "10/week"])
    def test_rate_limit_format(self, value):
        with pytest.raises(ValidationError):
            make_settings(RATE_LIMIT_AUTH=value)

    def test_token_lifetimes(self):
        config = make_settings(JWT_ACCESS_EXPIRATION_MINUTES=15, JWT_REFRESH_EXPIRATION_DAYS=7)

        assert config.ACCESS_TOKEN_TTL_SECONDS == 900
        assert config.REFRESH_TOKEN_TTL_SECONDS == 604800

    @pytest.mark.parametrize(
        "protocol,port,expected",
        [("http", 80, "http://api.example.com"), ("https", 8443, "https://api.example.com:8443")],
    )
    def test_base_url(self, protocol, port, expected):
        config = make_settings(PROTOCOL=protocol, HOST="api.example.com", PORT=port)

        assert config.BASE_URL == expected
        assert config.API_PREFIX == "/api/v1"

    def test_development_forces_email_test_mode(self):
        config = make_settings(APP_ENV="development", EMAIL_TEST_MODE=False)

        assert config.EMAIL_TEST_MODE is True
        assert config.is_development

    def test_cors_origins_are_split(self):
        config = make_settings(ALLOWED_ORIGINS="https://a.example.com, https://b.example.com")

        assert config.ALLOWED_ORIGINS == ["https://a.example.com", "https://b.example.com"]

    def test_production_requires_smtp_credentials(self):
        config = make_settings(APP_ENV="production", REDIS_PASSWORD="pw", EMAIL_TEST_MODE=False)

        with pytest.raises(ValueError):
            config.validate_required_fields()

    def test_s3_storage_requires_bucket_and_credentials(self):
        with pytest.raises(ValidationError) as exc_info:
            make_settings(STORAGE_TYPE="s3", BUCKET_NAME="uploads")

        assert "AWS_ACCESS_KEY_ID" in str(exc_info.value)

    def test_local_storage_needs_nothing_else(self):
        assert make_settings(STORAGE_TYPE="local").STORAGE_TYPE == "local"

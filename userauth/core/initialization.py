"""Process-level setup run once before the FastAPI app is built.

Loads ``.env`` into the environment, installs the structlog pipeline and
turns down third-party loggers that are noisy at INFO.
"""

import logging

from dotenv import load_dotenv

from userauth.core.config.settings import settings
from userauth.core.logging import configure_logging, logger

QUIET_LOGGERS = ("pymongo.serverSelection", "pymongo.topology", "pymongo.connection", "passlib")


def initialize_application() -> None:
    load_dotenv(override=True)

    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info(
        "application_initialized",
        env=settings.APP_ENV,
        database=settings.MONGODB_DB,
        email_test_mode=settings.EMAIL_TEST_MODE,
        rate_limit_enabled=settings.RATE_LIMIT_ENABLED,
    )

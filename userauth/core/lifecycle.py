"""Application lifecycle management.

This module handles application startup and shutdown events, ensuring proper
initialization and cleanup of application resources.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from userauth.core.config.settings import settings
from userauth.core.logging import logger
from userauth.infrastructure.dependency_injection.bootstrap import BootstrapperRunner
from userauth.infrastructure.dependency_injection.container import Container


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Builds the container, subscribes the event-driven operations and
        tears everything down on shutdown.

        Raises:
            ConnectionFailure: If MongoDB stays unreachable during startup
        """
        # Startup
        container = Container(settings)
        await container.startup()
        app.state.container = container

        BootstrapperRunner(container).run()
        logger.info("application_startup", env=settings.APP_ENV, version=settings.VERSION)

        yield

        # Shutdown
        await container.shutdown()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan

"""FastAPI application factory.

The built-in documentation routes are disabled; `userauth.adapters.api.v1.docs`
serves them behind basic auth instead. Every API route is mounted under
``/api/{API_VERSION}``; the Prometheus scrape endpoint sits at the root.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from userauth.adapters.api.v1 import api_router
from userauth.adapters.api.v1.docs import router as docs_router
from userauth.adapters.api.v1.metrics import router as metrics_router
from userauth.core.config.settings import settings
from userauth.core.handlers import register_exception_handlers
from userauth.core.lifecycle import create_lifespan_manager
from userauth.core.middleware import configure_middleware
from userauth.core.ratelimiter import limiter


def create_application() -> FastAPI:
    """Builds the app with middleware, error handlers and routers attached.

    The dependency container is created by the lifespan, so routes that
    resolve dependencies need the app to be started (or a container set on
    ``app.state`` in tests).
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=create_lifespan_manager(),
        default_response_class=JSONResponse,
    )

    # read by SlowAPIMiddleware and @limiter.limit
    app.state.limiter = limiter

    configure_middleware(app)
    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(docs_router)
    app.include_router(metrics_router)

    return app

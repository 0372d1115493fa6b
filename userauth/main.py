"""Main application entry point for the FastAPI application.

Run with ``uvicorn userauth.main:app`` or ``python -m userauth.main``.
"""

import uvicorn

from userauth.core.application import create_application
from userauth.core.config.settings import settings
from userauth.core.initialization import initialize_application

# Initialize the application
initialize_application()

# Create the FastAPI application
app = create_application()


if __name__ == "__main__":
    uvicorn.run(
        "userauth.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        workers=settings.API_WORKERS,
    )

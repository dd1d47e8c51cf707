"""Main application entry point for the password recovery service.

This module initializes the application and creates the FastAPI instance
using the application factory pattern. Run it directly for a local server:

    python -m src.main
"""

import uvicorn

from src.core.application import create_application
from src.core.config.settings import settings
from src.core.initialization import initialize_application

# Initialize the application
initialize_application()

# Create the FastAPI application
app = create_application()


if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        workers=settings.API_WORKERS,
        reload=settings.RELOAD,
    )

"""Main application entry point for the FastAPI application.

This module serves as the central entry point for the application.
It initializes the application and creates the FastAPI instance using
the application factory pattern.
"""

from bakery.core.application import create_application
from bakery.core.config.settings import settings
from bakery.core.initialization import initialize_application

# Initialize the application
initialize_application()

# Create the FastAPI application
app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("bakery.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)

"""Main entry point for TraceMind."""

import uvicorn
from dotenv import load_dotenv

from tracemind.api import create_fastapi_app
from tracemind.app import Application
from tracemind.config import PROJECT_ROOT, Settings
from tracemind.logging_config import setup_logging


def main():
    """Run the application."""
    load_dotenv(PROJECT_ROOT / ".env")

    # Get configuration from environment
    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_file)

    # Create FastAPI app
    app = create_fastapi_app(Application(settings))

    # Run with uvicorn
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

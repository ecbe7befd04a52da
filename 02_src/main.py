"""Main entry point for the workflow timeline service."""

import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from timeline.api import create_fastapi_app, get_app
from timeline.config import load_settings
from timeline.errors import ConfigurationError
from timeline.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    # Missing credentials abort startup rather than failing per request
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.critical("Invalid configuration: %s", e)
        sys.exit(1)

    app = create_fastapi_app(get_app(settings), settings.cors_allow_origins)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()

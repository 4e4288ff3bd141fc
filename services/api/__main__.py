"""
API Service Entry Point

Allows execution via: python -m services.api
"""

import uvicorn

from services.api.app import create_app
from utils.config import settings
from utils.logging import setup_logging


def main() -> None:
    """Configure logging and serve the API on the configured port."""
    setup_logging(
        level=settings.LOG_LEVEL,
        format_type=settings.LOG_FORMAT,
        output=settings.LOG_OUTPUT,
        log_file=settings.LOG_FILE,
    )
    # log_config=None keeps uvicorn on the root configuration above
    uvicorn.run(
        create_app(settings),
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()

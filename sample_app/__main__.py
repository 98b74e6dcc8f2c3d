"""Command-line entrypoint for running the sample app."""

from __future__ import annotations

import uvicorn

from .config import get_settings
from .utils.logging import configure_logging


def main() -> None:
    """Launch the FastAPI application using configured host/port/log level."""

    settings = get_settings()
    logger = configure_logging(settings.log_level)
    logger.info("Starting app...")
    uvicorn.run(
        "sample_app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()

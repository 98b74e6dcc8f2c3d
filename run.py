#!/usr/bin/env python3
"""Development launcher for the sample app."""

from __future__ import annotations

import argparse
import os
from pathlib import Path

import uvicorn

from sample_app.config import DEFAULT_PORT
from sample_app.utils.logging import configure_logging

APP = "sample_app.main:app"
DEFAULT_HOST = "0.0.0.0"
PROJECT_ROOT = Path(__file__).resolve().parent


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the launcher script."""

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--host",
        default=os.getenv("HOST", DEFAULT_HOST),
        help="Host interface for the server.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", DEFAULT_PORT)),
        help="Port for the server.",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "info"),
        help="Log level passed to Uvicorn.",
    )
    parser.add_argument(
        "--reload",
        dest="reload",
        action="store_true",
        default=os.getenv("RELOAD", "false").lower() in {"1", "true", "yes"},
        help="Enable autoreload (default: off).",
    )
    return parser.parse_args()


def main() -> None:
    """Launch a single Uvicorn server for the app."""

    args = parse_args()
    configure_logging(args.log_level).info("Starting app...")

    uvicorn.run(
        APP,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        reload=args.reload,
        reload_dirs=[str(PROJECT_ROOT / "sample_app")] if args.reload else None,
    )


if __name__ == "__main__":
    main()

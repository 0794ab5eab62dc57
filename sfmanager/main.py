"""
SFManager API - main entry point.

    python -m sfmanager.main
"""

from __future__ import annotations

import logging

import uvicorn

from sfmanager.api.app import create_app
from sfmanager.config import get_settings


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def main():
    """Main entry point."""
    settings = get_settings()
    configure_logging(settings.log_level)
    # Fail before binding the port if the secret is missing.
    settings.require_jwt_secret()

    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

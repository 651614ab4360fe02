"""slackwhen — Main entry point."""

import logging
import os
from typing import Optional

import uvicorn

from .config import SlackWhenSettings, load_settings
from .server import create_app

_log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("slackwhen")


def setup_logging(debug: bool = False, log_file: Optional[str] = None):
    """Log to stderr, and to ``log_file`` as well when one is configured."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(os.path.expanduser(log_file), encoding="utf-8"))

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=_log_format,
        handlers=handlers,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def run(settings: Optional[SlackWhenSettings] = None):
    """Start the HTTP API and block until it stops."""
    settings = settings or load_settings()
    setup_logging(settings.debug, settings.log_file)

    app = create_app(settings=settings)
    logger.info(f"Server running on http://localhost:{settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


def main():
    """Entry point."""
    run()


if __name__ == "__main__":
    main()

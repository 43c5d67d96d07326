"""Logging configuration for the application."""

import logging
import sys

from onetime_access.core.config import get_settings
from onetime_access.middleware.request_id import RequestIDLogFilter


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout; each line carries the request ID ('-' outside requests).
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
        handlers=[handler],
    )
    # httpx logs every Firestore request URL at INFO; keep it quiet unless debugging.
    logging.getLogger("httpx").setLevel(log_level if settings.debug else logging.WARNING)

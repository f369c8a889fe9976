"""Logging configuration for the application."""

import logging
import sys

from app.core.config import get_settings
from app.core.request_context import get_request_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"


class RequestIdLogFilter(logging.Filter):
    """Attach the current request ID (or "-") to every record as record.request_id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout. Calling it again is a no-op (basicConfig).
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdLogFilter())
    logging.basicConfig(level=log_level, format=LOG_FORMAT, handlers=[handler])
    # SQL echo goes through the sqlalchemy.engine logger; keep it quiet unless asked.
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

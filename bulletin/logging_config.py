"""
Bulletin Board API — Logging Configuration
============================================

What:  One-time logging setup shared by the HTTP server and the Lambda
       entry point, plus the request-ID context used in every log line.
How:   Standard library logging to stdout. A filter copies the current
       request ID (a ContextVar) onto each record as `request_id`.

Format:
    2024-05-01T12:00:00 [INFO] bulletin.router [3f2a9c1d]: GET /posts → 200 (12ms)
"""

import logging
import sys
from contextvars import ContextVar

from bulletin.config import settings

# Coroutine-local: concurrent requests on one loop each see their own ID.
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s"


class RequestIDFilter(logging.Filter):
    """Attach the current request ID to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def setup_logging(level: str = None) -> None:
    """
    Configure the root logger.

    Safe to call more than once (basicConfig with force=True replaces the
    previous handlers), which matters on warm Lambda containers.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDFilter())

    logging.basicConfig(
        level=getattr(logging, level or settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

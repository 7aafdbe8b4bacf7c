"""
Logging setup shared by the API server and the job runner.

Modules log through ``logging.getLogger(__name__)``; this only wires handlers.
"""

import logging
from typing import Optional

from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure the root logger once. Later calls are no-ops."""
    global _configured
    if _configured:
        return
    _configured = True

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )

    # Request-level chatter from the HTTP client is not useful per item
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

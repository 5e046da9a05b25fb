from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | cid=%(correlation_id)s | %(message)s"

# Set per request by the HTTP middleware in tasvideos.api.main.
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


class LoggingContextFilter(logging.Filter):
    """Stamp every record with the current request's correlation id ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get() or "-"
        return True


# PUBLIC_INTERFACE
def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Route all logging to stdout with the correlation-aware format.

    Replaces any handlers already installed on the root logger, so calling it
    more than once does not duplicate output.
    """
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    handler.addFilter(LoggingContextFilter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)

"""
Logging configuration for the VEER services.

Supports two output formats selected by ``Settings.log_format``:
- ``json``: one JSON object per line, including any ``extra=`` fields
- ``text``: human readable console lines
"""
import json
import logging
import sys
from datetime import datetime, UTC
from typing import Optional

# Attributes every LogRecord carries; anything else came in through extra=
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(level: str = "INFO", log_format: str = "json", stream: Optional[object] = None) -> None:
    """
    Configure the root logger.

    Call once per process, before the first log line. Calling it again
    replaces the previously installed handler.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    if log_format.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_veer_handler", False):
            root.removeHandler(existing)
    handler._veer_handler = True
    root.addHandler(handler)
    root.setLevel(level.upper())

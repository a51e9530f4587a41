"""Single-line JSON log output.

Enabled with ``API_STRUCTURED_LOGGING=true``.  Each line looks like::

    {"timestamp": "2025-05-15T12:34:56.789012+00:00", "level": "WARNING",
     "logger": "api.access", "message": "POST /api/v1/validate -> 401",
     "correlation_id": "...", "request": {...}}

``correlation_id`` and ``request`` appear only on access records written by
:class:`~api.middleware.logging.RequestLoggingMiddleware`; ``exc_info``
only when an exception is attached.
"""

from __future__ import annotations

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        access: dict[str, Any] | None = getattr(record, "request", None)
        if access is not None:
            if access.get("correlation_id"):
                payload["correlation_id"] = access["correlation_id"]
            payload["request"] = access

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_info"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_json_logging(level: int = logging.INFO) -> None:
    """Replace the root logger's handlers with one JSON ``StreamHandler``."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(level)

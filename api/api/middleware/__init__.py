"""Middleware components for the license API."""

from __future__ import annotations

from api.middleware.auth import API_KEY_HEADER, APIKeyMiddleware
from api.middleware.json_formatter import JSONFormatter, configure_json_logging
from api.middleware.logging import RequestLoggingMiddleware

__all__ = [
    "API_KEY_HEADER",
    "APIKeyMiddleware",
    "JSONFormatter",
    "RequestLoggingMiddleware",
    "configure_json_logging",
]

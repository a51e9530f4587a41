"""Request access logging for the license API.

One record per request on the ``api.access`` logger.  The record's
``request`` attribute holds the fields as a dictionary, which
:class:`~api.middleware.json_formatter.JSONFormatter` emits verbatim.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("api.access")

CORRELATION_HEADER = "X-Correlation-ID"

# Lower-cased names of headers whose values never reach the log.
_MASKED_HEADERS = frozenset({"api-key", "authorization", "cookie"})


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


def _route_template(request: Request) -> str | None:
    """Return the matched route path (``/api/v1/licenses/{license_id}``), if routing got that far.

    Routes of an included router may report their path relative to the
    router's prefix; the prefix is then taken from the request path, one
    segment per template segment.
    """
    template: str | None = getattr(request.scope.get("route"), "path", None)
    if template is None:
        return None
    segments = request.url.path.strip("/").split("/")
    template_segments = template.strip("/").split("/")
    prefix = segments[: max(len(segments) - len(template_segments), 0)]
    if not prefix:
        return template
    return "/" + "/".join(prefix + template_segments)


def _access_record(request: Request, status_code: int, duration_ms: float, correlation_id: str) -> dict[str, Any]:
    path_params = request.scope.get("path_params") or {}
    return {
        "method": request.method,
        "path": request.url.path,
        "route": _route_template(request),
        "license_id": path_params.get("license_id"),
        "status_code": status_code,
        "duration_ms": duration_ms,
        "client": request.client.host if request.client else None,
        "correlation_id": correlation_id,
        "authenticated": getattr(request.state, "authenticated", False),
        "headers": {k: "***" if k.lower() in _MASKED_HEADERS else v for k, v in request.headers.items()},
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, route, status and duration of every request.

    The ``X-Correlation-ID`` request header is reused when present, otherwise
    a UUID-4 is generated; either way it is returned on the response.
    Rejections (4xx) are logged at WARNING and failures (5xx) at ERROR.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[CORRELATION_HEADER] = correlation_id
            return response
        finally:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            record = _access_record(request, status_code, duration_ms, correlation_id)
            logger.log(
                _level_for(status_code),
                "%s %s -> %d",
                request.method,
                request.url.path,
                status_code,
                extra={"request": record},
            )

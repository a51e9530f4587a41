"""API key authentication for license management endpoints.

Clients send the key in the ``API-KEY`` header.  Only paths under the
protected prefixes require it; health checks and public signature
validation stay open so that distributed clients can call them.
"""

from __future__ import annotations

import hmac
import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

API_KEY_HEADER = "API-KEY"

_DEFAULT_PROTECTED_PREFIXES: tuple[str, ...] = ("/api/v1/licenses",)


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Reject requests to protected paths that lack the configured API key.

    Parameters
    ----------
    app:
        The wrapped ASGI application.
    api_key:
        The expected key.  When ``None`` every protected request is refused
        with 503 because the server was started without a key.
    protected_prefixes:
        Path prefixes that require the key.
    """

    def __init__(
        self,
        app: ASGIApp,
        api_key: str | None,
        protected_prefixes: tuple[str, ...] = _DEFAULT_PROTECTED_PREFIXES,
    ) -> None:
        super().__init__(app)
        self._api_key = api_key.encode("utf-8") if api_key else None
        self._protected_prefixes = protected_prefixes

    def _is_protected(self, path: str) -> bool:
        return any(path == prefix or path.startswith(prefix + "/") for prefix in self._protected_prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._is_protected(request.url.path):
            return await call_next(request)

        if self._api_key is None:
            logger.error("Rejecting %s: no API key configured", request.url.path)
            return JSONResponse(status_code=503, content={"detail": "Service unavailable"})

        provided = request.headers.get(API_KEY_HEADER, "")
        if not provided or not hmac.compare_digest(provided.encode("utf-8"), self._api_key):
            return JSONResponse(status_code=401, content={"detail": "Invalid or missing API key"})

        request.state.authenticated = True
        return await call_next(request)

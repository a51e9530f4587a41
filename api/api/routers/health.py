"""Health-check endpoint."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter
from sqlalchemy import text

from api import __version__
from api.dependencies import ServicesDep, SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(session: SessionDep, services: ServicesDep) -> dict[str, Any]:
    """Return service health.

    Always answers 200 so load balancers see the process as alive; the
    ``db`` field reports whether the license store is reachable.
    """
    result: dict[str, Any] = {
        "status": "healthy",
        "version": __version__,
        "db": "ok",
        "signing_key_bits": services.signer.key_size,
    }

    try:
        await session.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("DB health check failed: %s", exc)
        result["db"] = "degraded"

    return result

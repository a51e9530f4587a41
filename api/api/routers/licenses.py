"""API router for license management and issuance.

All endpoints require the ``API-KEY`` header (see
:class:`api.middleware.auth.APIKeyMiddleware`).
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from api.dependencies import SessionDep, SignerDep
from api.services.license_service import LicenseNotFoundError, LicenseService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/licenses", tags=["licenses"])


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CreateLicenseRequest(BaseModel):
    """Request body for creating a license."""

    product: str = Field(..., min_length=1, max_length=256, description="Product the license grants.")
    data: dict[str, Any] = Field(default_factory=dict, description="Free-form customer metadata.")
    active: bool = Field(False, description="Whether the license starts active.")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("")
async def list_licenses(
    session: SessionDep,
    limit: int = Query(100, ge=1, le=500, description="Maximum records to return."),
    offset: int = Query(0, ge=0, description="Records to skip."),
) -> list[dict[str, Any]]:
    """List stored licenses."""
    return await LicenseService(session).list_licenses(limit=limit, offset=offset)


@router.post("")
async def create_license(body: CreateLicenseRequest, session: SessionDep) -> dict[str, Any]:
    """Create a license with a new id."""
    return await LicenseService(session).create_license(body.product, body.data, active=body.active)


@router.get("/{license_id}")
async def get_license(license_id: str, session: SessionDep) -> dict[str, Any]:
    """Return one license."""
    try:
        return await LicenseService(session).get_license(license_id)
    except LicenseNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.put("/{license_id}")
async def update_license(
    license_id: str,
    session: SessionDep,
    active: str | None = Query(None, description="'true' or 'false'; any other value is ignored."),
) -> dict[str, Any]:
    """Activate or deactivate a license."""
    flag = {"true": True, "false": False}.get(active or "")
    try:
        return await LicenseService(session).set_active(license_id, flag)
    except LicenseNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("/{license_id}/sign")
async def sign_license(license_id: str, session: SessionDep, signer: SignerDep) -> dict[str, Any]:
    """Issue a signature document for a stored license."""
    try:
        signature = await LicenseService(session, signer=signer).sign_license(license_id)
    except LicenseNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return signature.model_dump()

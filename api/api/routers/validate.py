"""Public signature validation endpoint.

Distributed clients post the signature document they hold; the server
verifies it against the authority's public key and reports whether the
license it names is known and active.  No API key is required.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from license_engine.errors import EncodingError, LicenseError
from license_engine.signature import Signature

from api.dependencies import SessionDep, VerifierDep
from api.services.license_service import LicenseNotFoundError, LicenseService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["validation"])


@router.post("/validate")
async def validate_signature(request: Request, session: SessionDep, verifier: VerifierDep) -> dict[str, Any]:
    """Validate a signature document.

    Returns 400 for a body that is not a signature document, 401 for a
    signature that does not verify, and 404 when the signed license id is
    unknown to this authority.
    """
    try:
        signature = Signature.from_json(await request.body())
    except EncodingError as exc:
        raise HTTPException(status_code=400, detail="Invalid request body - expected a signature") from exc

    service = LicenseService(session, verifier=verifier)
    try:
        return await service.validate(signature)
    except EncodingError as exc:
        raise HTTPException(status_code=400, detail="Invalid request body - expected a signature") from exc
    except LicenseNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Unknown license") from exc
    except LicenseError as exc:
        raise HTTPException(status_code=401, detail="Invalid signature") from exc

"""Service layer for license management, signing and validation."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from license_engine.license import License
from license_engine.signature import Signature
from license_engine.signer import Signer
from license_engine.state import LicenseRepository, LicenseTable
from license_engine.verifier import Verifier

logger = logging.getLogger(__name__)

# Attribute names embedded in every signed license.
LICENSE_ID_ATTRIBUTE = "license-id"
PRODUCT_ATTRIBUTE = "product"


class LicenseNotFoundError(LookupError):
    """Raised when a license id does not exist in the store."""

    def __init__(self, license_id: str) -> None:
        super().__init__(f"License '{license_id}' not found")
        self.license_id = license_id


class LicenseService:
    """Business logic for the license authority.

    Parameters
    ----------
    session:
        Active database session.
    signer:
        Signer used to issue licenses (required by :meth:`sign_license`).
    verifier:
        Verifier used to check presented licenses (required by :meth:`validate`).
    """

    def __init__(
        self,
        session: AsyncSession,
        *,
        signer: Signer | None = None,
        verifier: Verifier | None = None,
    ) -> None:
        self._repo = LicenseRepository(session)
        self._signer = signer
        self._verifier = verifier

    async def create_license(self, product: str, data: dict[str, Any], *, active: bool) -> dict[str, Any]:
        row = await self._repo.create(product, data, active=active)
        logger.info("Created license: id=%s product=%s active=%s", row.id, product, active)
        return self._to_dict(row)

    async def list_licenses(self, *, limit: int = 100, offset: int = 0) -> list[dict[str, Any]]:
        rows = await self._repo.list_all(limit=limit, offset=offset)
        return [self._to_dict(r) for r in rows]

    async def get_license(self, license_id: str) -> dict[str, Any]:
        """Return one license.

        Raises
        ------
        LicenseNotFoundError
            If no license has this id.
        """
        return self._to_dict(await self._get_row(license_id))

    async def set_active(self, license_id: str, active: bool | None) -> dict[str, Any]:
        """Set the ``active`` flag; ``None`` leaves the license unchanged."""
        if active is None:
            return await self.get_license(license_id)
        row = await self._repo.set_active(license_id, active)
        if row is None:
            raise LicenseNotFoundError(license_id)
        logger.info("License %s active=%s", license_id, active)
        return self._to_dict(row)

    async def sign_license(self, license_id: str) -> Signature:
        """Issue a signature for a stored license.

        The signed attributes are the license id, the product, and every
        string-valued entry of the stored ``data`` whose name does not clash
        with those two.
        """
        if self._signer is None:
            raise RuntimeError("LicenseService was constructed without a signer")
        row = await self._get_row(license_id)

        attributes = License({k: v for k, v in (row.data or {}).items() if k and isinstance(v, str)})
        attributes.set(LICENSE_ID_ATTRIBUTE, row.id)
        attributes.set(PRODUCT_ATTRIBUTE, row.product)

        signature = self._signer.sign(attributes)
        logger.info("Signed license: id=%s attributes=%d", row.id, len(attributes))
        return signature

    async def validate(self, signature: Signature) -> dict[str, Any]:
        """Verify a presented signature and resolve the license it names.

        Raises
        ------
        license_engine.errors.LicenseError
            If the signature does not verify.
        LicenseNotFoundError
            If the signed ``license-id`` is not in the store.
        """
        if self._verifier is None:
            raise RuntimeError("LicenseService was constructed without a verifier")
        self._verifier.verify(signature)

        license_id = signature.license.get(LICENSE_ID_ATTRIBUTE, "")
        row = await self._get_row(license_id)
        return {"valid": True, "license_id": row.id, "active": row.active}

    async def _get_row(self, license_id: str) -> LicenseTable:
        row = await self._repo.get(license_id) if license_id else None
        if row is None:
            raise LicenseNotFoundError(license_id)
        return row

    @staticmethod
    def _to_dict(row: LicenseTable) -> dict[str, Any]:
        return {
            "id": row.id,
            "created_at": row.created_at.isoformat() if row.created_at else None,
            "updated_at": row.updated_at.isoformat() if row.updated_at else None,
            "active": row.active,
            "product": row.product,
            "data": row.data or {},
        }

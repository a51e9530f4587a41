"""Repository for the ``licenses`` table."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from license_engine.state.tables import LicenseTable

_MAX_PAGE_SIZE = 500


class LicenseRepository:
    """CRUD operations for the ``licenses`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        product: str,
        data: dict[str, Any] | None = None,
        *,
        active: bool = False,
        license_id: str | None = None,
    ) -> LicenseTable:
        """Insert a new license record and return the persisted row."""
        row = LicenseTable(product=product, data=dict(data or {}), active=active)
        if license_id is not None:
            row.id = license_id
        self._session.add(row)
        await self._session.flush()
        return row

    async def get(self, license_id: str) -> LicenseTable | None:
        """Fetch a single license by id."""
        stmt = select(LicenseTable).where(LicenseTable.id == license_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self, *, limit: int = 100, offset: int = 0) -> list[LicenseTable]:
        """Return licenses ordered by creation time, with pagination.

        ``limit`` is capped at ``_MAX_PAGE_SIZE``.
        """
        limit = max(1, min(limit, _MAX_PAGE_SIZE))
        offset = max(offset, 0)
        stmt = select(LicenseTable).order_by(LicenseTable.created_at, LicenseTable.id).limit(limit).offset(offset)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def set_active(self, license_id: str, active: bool) -> LicenseTable | None:
        """Set the ``active`` flag of a license and return the row, or ``None`` if unknown."""
        row = await self.get(license_id)
        if row is None:
            return None
        row.active = active
        await self._session.flush()
        return row

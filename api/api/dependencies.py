"""Application services and FastAPI dependency injection.

Everything a request handler needs is held by one :class:`AppServices`
container built at startup and stored on ``app.state``.  Handlers receive
its parts through the dependencies below instead of module globals, so an
application can be constructed with any signer, verifier or database.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from license_engine.config import Settings as KeySettings
from license_engine.config import load_settings
from license_engine.signer import Signer
from license_engine.state import create_tables, get_engine, get_session_factory
from license_engine.verifier import Verifier

from api.config import APISettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppServices:
    """Long-lived collaborators shared by all requests.

    ``engine`` is set only when the services own the database engine and
    must dispose it at shutdown.
    """

    signer: Signer
    verifier: Verifier
    session_factory: async_sessionmaker[AsyncSession]
    engine: AsyncEngine | None = None

    async def dispose(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()


async def build_services(settings: APISettings, key_settings: KeySettings | None = None) -> AppServices:
    """Load keys, open the database and create tables.

    Raises
    ------
    license_engine.errors.KeyLoadError
        If the signing or verification key is missing or invalid.
    """
    key_settings = key_settings or load_settings()
    signer = key_settings.load_signer()
    verifier = key_settings.load_verifier()

    if signer.public_key().public_numbers() != verifier.public_key.public_numbers():
        logger.warning("Configured public key does not match the signing key; issued licenses will not validate")

    engine = get_engine(settings.database_url)
    await create_tables(engine)
    logger.info("License store ready (%s)", settings.database_url.split("://", 1)[0])

    return AppServices(
        signer=signer,
        verifier=verifier,
        session_factory=get_session_factory(engine),
        engine=engine,
    )


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_services(request: Request) -> AppServices:
    """Return the services container attached to the running application."""
    services: AppServices | None = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Application services have not been initialised. Ensure the app lifespan has run.")
    return services


ServicesDep = Annotated[AppServices, Depends(get_services)]


async def get_db_session(services: ServicesDep) -> AsyncGenerator[AsyncSession, None]:
    """Yield an ``AsyncSession`` that commits on clean exit and rolls back on error."""
    session = services.session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


SessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_signer(services: ServicesDep) -> Signer:
    return services.signer


def get_verifier(services: ServicesDep) -> Verifier:
    return services.verifier


SignerDep = Annotated[Signer, Depends(get_signer)]
VerifierDep = Annotated[Verifier, Depends(get_verifier)]

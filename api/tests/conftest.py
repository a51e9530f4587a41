"""Shared fixtures for license API tests.

Provides a FastAPI application wired to a temporary SQLite license store and
a freshly generated key pair, plus an authenticated ``httpx.AsyncClient``.
The application lifespan does not run under ``ASGITransport``, so services
are built here and injected into :func:`api.main.create_app`.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from license_engine.keys import generate_private_key
from license_engine.signer import Signer
from license_engine.state import create_tables, get_engine, get_session_factory
from license_engine.verifier import Verifier

from api.config import APISettings
from api.dependencies import AppServices
from api.main import create_app

TEST_API_KEY = "test-key"


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def private_key() -> rsa.RSAPrivateKey:
    return generate_private_key(2048)


@pytest.fixture(scope="session")
def other_private_key() -> rsa.RSAPrivateKey:
    return generate_private_key(2048)


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


@pytest.fixture
def api_settings() -> APISettings:
    return APISettings(api_key=TEST_API_KEY, production=False)


@pytest_asyncio.fixture
async def services(tmp_path: Path, private_key: rsa.RSAPrivateKey) -> AsyncGenerator[AppServices, None]:
    engine = get_engine(f"sqlite+aiosqlite:///{tmp_path / 'state.db'}")
    await create_tables(engine)
    svc = AppServices(
        signer=Signer(private_key),
        verifier=Verifier(private_key.public_key()),
        session_factory=get_session_factory(engine),
        engine=engine,
    )
    yield svc
    await svc.dispose()


@pytest.fixture
def app(api_settings: APISettings, services: AppServices) -> FastAPI:
    return create_app(api_settings, services)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Client that sends the configured API key on every request."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers={"API-KEY": TEST_API_KEY}) as ac:
        yield ac


@pytest_asyncio.fixture
async def anon_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Client without credentials."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

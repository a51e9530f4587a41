"""Shared fixtures for licensectl tests.

Key pairs are written once per session; each test runs in its own working
directory with no ``LICENSE_*`` or ``API_*`` variables set.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from license_engine.keys import write_keypair


@pytest.fixture(scope="session")
def keypair(tmp_path_factory: pytest.TempPathFactory) -> tuple[Path, Path]:
    """``(private.pem, public.pem)`` for the issuing authority."""
    return write_keypair(tmp_path_factory.mktemp("keys"), 1024)


@pytest.fixture(scope="session")
def other_keypair(tmp_path_factory: pytest.TempPathFactory) -> tuple[Path, Path]:
    return write_keypair(tmp_path_factory.mktemp("other-keys"), 1024)


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith(("LICENSE_", "API_")):
            monkeypatch.delenv(name)

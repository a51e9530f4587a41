"""Shared fixtures for license engine tests.

RSA key generation is slow, so key pairs are generated once per session.
"""

from __future__ import annotations

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from license_engine.keys import generate_private_key
from license_engine.signer import Signer
from license_engine.verifier import Verifier


@pytest.fixture(scope="session")
def private_key() -> rsa.RSAPrivateKey:
    """A 2048-bit issuing key shared by the whole test session."""
    return generate_private_key(2048)


@pytest.fixture(scope="session")
def public_key(private_key: rsa.RSAPrivateKey) -> rsa.RSAPublicKey:
    return private_key.public_key()


@pytest.fixture(scope="session")
def other_private_key() -> rsa.RSAPrivateKey:
    """An unrelated 2048-bit key for cross-key rejection tests."""
    return generate_private_key(2048)


@pytest.fixture
def signer(private_key: rsa.RSAPrivateKey) -> Signer:
    return Signer(private_key)


@pytest.fixture
def verifier(public_key: rsa.RSAPublicKey) -> Verifier:
    return Verifier(public_key)

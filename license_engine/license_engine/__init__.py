"""Signed software license issuance and verification.

An issuing authority signs a :class:`License` with its RSA private key to get
a portable :class:`Signature`; anyone holding the public key can check the
signature offline with a :class:`Verifier`.
"""

from license_engine.canonical import canonicalize, digest
from license_engine.errors import (
    EncodingError,
    KeyLoadError,
    LicenseError,
    SigningError,
    VerificationError,
)
from license_engine.keys import (
    generate_private_key,
    load_private_key,
    load_private_key_base64,
    load_private_key_pem,
    load_public_key,
    load_public_key_base64,
    load_public_key_pem,
    private_key_to_pem,
    public_key_to_pem,
    write_keypair,
)
from license_engine.license import License, new_license
from license_engine.signature import Signature, load_signature
from license_engine.signer import Signer
from license_engine.verifier import Verifier

__version__ = "0.1.0"

__all__ = [
    "EncodingError",
    "KeyLoadError",
    "License",
    "LicenseError",
    "Signature",
    "Signer",
    "SigningError",
    "VerificationError",
    "Verifier",
    "canonicalize",
    "digest",
    "generate_private_key",
    "load_private_key",
    "load_private_key_base64",
    "load_private_key_pem",
    "load_public_key",
    "load_public_key_base64",
    "load_public_key_pem",
    "load_signature",
    "new_license",
    "private_key_to_pem",
    "public_key_to_pem",
    "write_keypair",
]

"""Typed failures raised by the license engine.

Every public operation either returns normally or raises one of the
subclasses below.  Nothing is retried internally and nothing is logged on
failure; deciding what to do with an error belongs to the caller.
"""

from __future__ import annotations


class LicenseError(Exception):
    """Base class for all license engine failures."""


class KeyLoadError(LicenseError):
    """Raised when key material cannot be read, decoded, or is of the wrong type."""


class SigningError(LicenseError):
    """Raised when a signature cannot be produced with the configured private key."""


class EncodingError(LicenseError):
    """Raised when a signature or its serialized document is malformed."""


class VerificationError(LicenseError):
    """Raised when a signature does not verify.

    The message never says *why*: tampered content, a foreign key and
    corrupted signature bytes all surface as the same rejection.
    """

    def __init__(self) -> None:
        super().__init__("Signature verification failed")

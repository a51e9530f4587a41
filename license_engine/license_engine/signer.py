"""License signing with an RSA private key (issuing authority side)."""

from __future__ import annotations

import base64
from collections.abc import Mapping

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa, utils

from license_engine.canonical import DIGEST_SIZE, digest
from license_engine.errors import SigningError
from license_engine.license import License
from license_engine.signature import Signature

# PKCS#1 v1.5 needs 11 bytes of padding plus the 19-byte SHA-256 DigestInfo
# prefix around the digest itself.
MIN_MODULUS_BYTES = 11 + 19 + DIGEST_SIZE


class Signer:
    """Signs licenses with an RSA private key.

    Produces distributable signatures for client devices or untrusted
    infrastructure.  The key is fixed at construction, so one instance can be
    shared between threads.

    Parameters
    ----------
    private_key:
        The issuing authority's RSA private key.
    """

    def __init__(self, private_key: rsa.RSAPrivateKey) -> None:
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise TypeError(f"Signer requires an RSA private key, got {type(private_key).__name__}")
        self._private_key = private_key

    @property
    def key_size(self) -> int:
        """Modulus size of the signing key in bits."""
        return self._private_key.key_size

    def public_key(self) -> rsa.RSAPublicKey:
        """Return the public half of the signing key."""
        return self._private_key.public_key()

    def sign(self, license: Mapping[str, str]) -> Signature:
        """Sign *license* with RSA PKCS#1 v1.5 over its SHA-256 digest.

        The returned :class:`Signature` embeds a copy of the attributes and
        can be saved to a file and distributed.

        Raises
        ------
        TypeError
            If an attribute name or value is not a string.
        ValueError
            If an attribute name is empty.
        SigningError
            If the key is too small for the padded digest or the crypto
            backend cannot produce a signature.
        """
        attributes = License(license)
        if (self._private_key.key_size + 7) // 8 < MIN_MODULUS_BYTES:
            raise SigningError(
                f"{self._private_key.key_size}-bit key is too small for a PKCS#1 v1.5 SHA-256 signature"
            )

        try:
            raw = self._private_key.sign(
                digest(attributes),
                padding.PKCS1v15(),
                utils.Prehashed(hashes.SHA256()),
            )
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise SigningError(f"Signing failed: {exc}") from exc

        return Signature(sig=base64.b64encode(raw).decode("ascii"), license=dict(attributes))

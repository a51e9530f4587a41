"""License signature verification with an RSA public key (client side)."""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa, utils

from license_engine.canonical import digest
from license_engine.errors import EncodingError, LicenseError, VerificationError
from license_engine.signature import Signature


class Verifier:
    """Checks that signatures were issued by the holder of a private key.

    Meant for client code running on untrusted devices or infrastructure:
    only the public key is needed and no network access is made.

    Parameters
    ----------
    public_key:
        The issuing authority's RSA public key.
    """

    def __init__(self, public_key: rsa.RSAPublicKey) -> None:
        if not isinstance(public_key, rsa.RSAPublicKey):
            raise TypeError(f"Verifier requires an RSA public key, got {type(public_key).__name__}")
        self._public_key = public_key

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        return self._public_key

    def verify(self, signature: Signature) -> None:
        """Verify *signature* against the stored public key.

        The digest is recomputed from the embedded license, so any change to
        the attributes after signing is detected.

        Raises
        ------
        EncodingError
            If the signature text is not valid base64 or the attributes
            are not valid UTF-8 text.
        VerificationError
            If the signature does not match the license and key.
        """
        raw = signature.decoded()
        try:
            expected = digest(signature.license)
        except UnicodeEncodeError as exc:
            raise EncodingError("License attributes are not valid UTF-8 text") from exc
        try:
            self._public_key.verify(
                raw,
                expected,
                padding.PKCS1v15(),
                utils.Prehashed(hashes.SHA256()),
            )
        except InvalidSignature:
            raise VerificationError() from None

    def is_valid(self, signature: Signature) -> bool:
        """Return ``True`` only if :meth:`verify` succeeds."""
        try:
            self.verify(signature)
        except LicenseError:
            return False
        return True

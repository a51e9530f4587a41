"""License data model: an unordered set of named string claims."""

from __future__ import annotations

from collections import UserDict
from collections.abc import Mapping

from license_engine.canonical import PAIR_DELIMITER, TOKEN_SEPARATOR, digest


class License(UserDict[str, str]):
    """Arbitrary key/value license data (product, expiry, customer id, ...).

    Pass a License to :meth:`license_engine.signer.Signer.sign` to obtain a
    distributable :class:`~license_engine.signature.Signature`.

    Keys must be non-empty strings and values must be strings; assigning a
    key twice keeps the last value.  Keys and values should not contain
    ``:`` or ``,`` because the canonical form does not escape them.
    """

    def __setitem__(self, key: str, value: str) -> None:
        if not isinstance(key, str):
            raise TypeError(f"License attribute names must be str, got {type(key).__name__}")
        if not key:
            raise ValueError("License attribute names must be non-empty")
        if not isinstance(value, str):
            raise TypeError(f"License attribute {key!r} must have a str value, got {type(value).__name__}")
        super().__setitem__(key, value)

    def set(self, key: str, value: str) -> None:
        """Add or update one attribute."""
        self[key] = value

    def digest(self) -> bytes:
        """Return the SHA-256 digest of this license's canonical form."""
        return digest(self.data)

    def has_reserved_characters(self) -> bool:
        """Return ``True`` if any key or value contains a canonical-form delimiter."""
        return any(
            PAIR_DELIMITER in text or TOKEN_SEPARATOR in text for pair in self.data.items() for text in pair
        )


def new_license(data: Mapping[str, str] | None = None) -> License:
    """Create a :class:`License` from a plain mapping."""
    return License(data or {})

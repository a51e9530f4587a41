"""Deterministic canonical form and digest of a license's attributes.

Each ``key:value`` pair becomes one UTF-8 token, the tokens are sorted
byte-wise and joined with ``,``, and the result is hashed with SHA-256::

    {"product": "Pro", "id": "abc-123"}  ->  b"id:abc-123,product:Pro"

The form is independent of insertion order.  Delimiters are not escaped,
so ``:`` and ``,`` inside keys or values are unsupported: ``{"a": "b,c:d"}``
and ``{"a": "b", "c": "d"}`` share one canonical form.  Issuers that accept
arbitrary input should reject such licenses before signing (see
:meth:`license_engine.license.License.has_reserved_characters`).
"""

from __future__ import annotations

import hashlib
from collections.abc import Mapping

PAIR_DELIMITER = ":"
TOKEN_SEPARATOR = ","

# Size of the SHA-256 digest in bytes.
DIGEST_SIZE = 32


def canonicalize(attributes: Mapping[str, str]) -> bytes:
    """Return the canonical byte encoding of *attributes*.

    An empty mapping canonicalizes to ``b""``.
    """
    tokens = sorted(f"{key}{PAIR_DELIMITER}{value}".encode() for key, value in attributes.items())
    return TOKEN_SEPARATOR.encode().join(tokens)


def digest(attributes: Mapping[str, str]) -> bytes:
    """Return the 32-byte SHA-256 digest of the canonical form of *attributes*."""
    return hashlib.sha256(canonicalize(attributes)).digest()

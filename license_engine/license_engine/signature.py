"""Signed license artifact and its JSON persistence.

A signature document is a JSON object with two fields:

.. code-block:: json

    {
        "sig": "<base64-encoded RSA PKCS#1 v1.5 signature>",
        "license": {"id": "abc-123", "product": "Pro"}
    }

The same document is used for files and HTTP bodies.  Field names are part
of the distribution format and must not change.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from license_engine.errors import EncodingError
from license_engine.license import License

logger = logging.getLogger(__name__)


class Signature(BaseModel):
    """A license together with the issuing authority's signature over it.

    Carries everything needed for verification except the public key, and
    holds no secret material.
    """

    model_config = ConfigDict(frozen=True)

    sig: str = Field(..., min_length=1, description="Standard base64 of the raw signature bytes.")
    license: dict[str, str] = Field(default_factory=dict, description="The signed license attributes.")

    @field_validator("license", mode="before")
    @classmethod
    def _copy_mapping(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            return dict(v)
        return v

    @field_validator("license")
    @classmethod
    def _check_attributes(cls, v: dict[str, str]) -> dict[str, str]:
        if "" in v:
            raise ValueError("license attribute names must be non-empty")
        for key, value in v.items():
            try:
                key.encode("utf-8")
                value.encode("utf-8")
            except UnicodeEncodeError as exc:
                raise ValueError(f"license attribute {key!r} is not valid UTF-8 text") from exc
        return v

    @property
    def attributes(self) -> License:
        """A fresh :class:`License` holding the signed attributes."""
        return License(self.license)

    def decoded(self) -> bytes:
        """Return the raw signature bytes.

        Raises
        ------
        EncodingError
            If ``sig`` is not valid standard base64.
        """
        try:
            return base64.b64decode(self.sig, validate=True)
        except ValueError as exc:
            raise EncodingError(f"Signature is not valid base64: {exc}") from exc

    def to_json(self) -> str:
        """Serialize to the JSON distribution format."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, content: str | bytes) -> Signature:
        """Parse a signature document.

        Raises
        ------
        EncodingError
            If the content is not JSON or does not have the expected shape.
        """
        try:
            return cls.model_validate_json(content)
        except ValidationError as exc:
            raise EncodingError(f"Invalid signature document: {exc.error_count()} error(s)") from exc

    @classmethod
    def from_dict(cls, data: Any) -> Signature:
        """Build a signature from already-decoded JSON data."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise EncodingError(f"Invalid signature document: {exc.error_count()} error(s)") from exc

    def save(self, path: Path | str) -> None:
        """Write the signature document to *path*, replacing any existing file."""
        path = Path(path)
        path.write_text(self.to_json() + "\n", encoding="utf-8")
        logger.debug("Signature saved to %s (%d attributes)", path, len(self.license))


def load_signature(path: Path | str) -> Signature:
    """Load a signature document written by :meth:`Signature.save`.

    Raises
    ------
    EncodingError
        If the file cannot be read or does not hold a valid document.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise EncodingError(f"Cannot read signature file {path}: {exc}") from exc
    return Signature.from_json(raw)

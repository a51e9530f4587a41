"""API routers."""

from api.routers import health, licenses, validate

__all__ = ["health", "licenses", "validate"]

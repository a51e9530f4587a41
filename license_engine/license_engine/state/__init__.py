"""License persistence layer (PostgreSQL or local SQLite)."""

from license_engine.state.database import create_tables, get_engine, get_session_factory
from license_engine.state.repository import LicenseRepository
from license_engine.state.tables import Base, LicenseTable

__all__ = [
    "Base",
    "LicenseRepository",
    "LicenseTable",
    "create_tables",
    "get_engine",
    "get_session_factory",
]

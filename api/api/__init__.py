"""License authority HTTP API built on :mod:`license_engine`."""

__version__ = "0.1.0"

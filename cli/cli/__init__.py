"""licensectl: command-line interface for the license engine."""

__version__ = "0.1.0"

"""Service layer for the license API."""

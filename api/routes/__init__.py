"""API route handlers."""

from api.routes import health, prove

__all__ = ["health", "prove"]

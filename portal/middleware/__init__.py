"""Middleware components."""

from portal.middleware.auth import AuthMiddleware

__all__ = ["AuthMiddleware"]

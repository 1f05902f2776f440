"""Authentication middleware for provider-issued JWT tokens."""

import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from portal.utils.request_context import (
    clear_all_context,
    set_current_email,
    set_current_principal_id,
)
from portal.utils.security import decode_access_token


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that extracts and validates access tokens from requests.

    Tokens come from the external auth provider, either as a bearer token or
    in the access_token cookie. Requests without a valid token proceed with
    no principal set; endpoints that need one reject them.
    """

    # Paths that don't require authentication
    EXEMPT_PATHS = {
        "/health",
        "/api/docs",
        "/api/redoc",
        "/api/openapi.json",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and extract authentication context."""
        # Clear context from previous request
        clear_all_context()

        if request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        token = self._extract_token(request)
        if token:
            payload = decode_access_token(token)
            if payload:
                try:
                    set_current_principal_id(uuid.UUID(payload["sub"]))
                    set_current_email(payload.get("email") or None)
                except (ValueError, TypeError):
                    # Subject is not a UUID - context will remain unset
                    pass

        response = await call_next(request)

        # Clear context after request
        clear_all_context()

        return response

    def _extract_token(self, request: Request) -> str | None:
        """Extract the token from the Authorization header or access_token cookie."""
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            return auth_header.removeprefix("Bearer ").strip()

        return request.cookies.get("access_token")

"""Decoding of access tokens issued by the external auth provider."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from portal.config import settings

logger = logging.getLogger(__name__)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and validate an access token.

    Args:
        token: Encoded JWT from the Authorization header or cookie

    Returns:
        Token payload, or None if the token is invalid or expired
    """
    options = {"require": ["sub", "exp"]}
    try:
        return jwt.decode(
            token,
            settings.effective_jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options if settings.jwt_audience else {**options, "verify_aud": False},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Access token expired")
        return None
    except jwt.InvalidTokenError as exc:
        logger.debug(f"Invalid access token: {exc}")
        return None


def create_access_token(
    principal_id: uuid.UUID,
    email: str = "",
    expires_delta: timedelta | None = None,
) -> str:
    """Create an access token in the provider's format.

    Used by seed scripts and tests that stand in for the auth provider.

    Args:
        principal_id: Subject of the token
        email: Email claim
        expires_delta: Custom expiration time (one hour by default)

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(principal_id),
        "email": email,
        "iat": now,
        "exp": now + (expires_delta or timedelta(hours=1)),
    }
    if settings.jwt_audience:
        payload["aud"] = settings.jwt_audience

    return jwt.encode(
        payload,
        settings.effective_jwt_secret,
        algorithm=settings.jwt_algorithm,
    )

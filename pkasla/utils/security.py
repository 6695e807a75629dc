"""JWT helpers for request authentication."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from pkasla.config import settings


def create_access_token(
    user_id: uuid.UUID,
    role: str = "",
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token.

    Args:
        user_id: User's UUID
        role: User's role
        expires_delta: Custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_access_token_expire_minutes)

    now = datetime.now(timezone.utc)
    expire = now + expires_delta

    payload = {
        "sub": str(user_id),
        "role": role,
        "exp": expire,
        "iat": now,
        "jti": str(uuid.uuid4()),  # Unique token ID
        "type": "access",
    }

    return jwt.encode(
        payload,
        settings.effective_jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> dict[str, Any] | None:
    """Decode and validate a JWT token.

    Returns:
        Token payload dictionary if valid, None if invalid/expired
    """
    try:
        return jwt.decode(
            token,
            settings.effective_jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode an access token and verify it's an access token type."""
    payload = decode_token(token)
    if payload and payload.get("type") == "access":
        return payload
    return None

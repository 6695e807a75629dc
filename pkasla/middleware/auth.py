"""Authentication middleware for JWT token validation."""

import logging
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from pkasla.database import get_db_context
from pkasla.models.user import User
from pkasla.utils.request_context import (
    clear_all_context,
    set_current_user_id,
    set_current_user_role,
)
from pkasla.utils.security import decode_access_token

logger = logging.getLogger(__name__)


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that extracts and validates JWT tokens from requests.

    Supports both the Authorization header and the access_token cookie.
    The role comes from the stored user, not the token, and deactivated
    users get no context. Routes enforce access themselves with the
    permission decorators.
    """

    # Paths that never carry authentication
    EXEMPT_PATHS = {
        "/health",
        "/api/docs",
        "/api/redoc",
        "/api/openapi.json",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and extract authentication context."""
        clear_all_context()

        if request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        token = self._extract_token(request)
        if token:
            payload = decode_access_token(token)
            if payload:
                try:
                    user_id = uuid.UUID(payload["sub"])
                except (KeyError, ValueError, TypeError):
                    # Malformed subject - context stays unset
                    user_id = None

                if user_id is not None:
                    await self._set_user_context(user_id)

        response = await call_next(request)

        clear_all_context()

        return response

    async def _set_user_context(self, user_id: uuid.UUID) -> None:
        """Load the user and set the request context if the account is active."""
        async with get_db_context() as db:
            user = await db.get(User, user_id)

        if user is None or not user.is_active:
            logger.info(f"Rejected token for missing or inactive user {user_id}")
            return

        set_current_user_id(user.id)
        set_current_user_role(user.role)

    def _extract_token(self, request: Request) -> str | None:
        """Extract JWT token from request.

        Priority:
        1. Authorization header (Bearer token)
        2. access_token cookie
        """
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            return auth_header.removeprefix("Bearer ").strip()

        return request.cookies.get("access_token")

"""Maintenance mode middleware."""

import logging
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from pkasla.database import get_db_context
from pkasla.services.settings_service import get_settings_service
from pkasla.utils.request_context import is_admin

logger = logging.getLogger(__name__)


class MaintenanceMiddleware(BaseHTTPMiddleware):
    """Reject API traffic from non-admins while maintenance mode is on.

    Reads the cached settings, so a settings update takes effect on the next
    request after the cache is invalidated. Must run after AuthMiddleware.
    """

    API_PREFIX = "/api/v1/"
    EXEMPT_PREFIXES = ("/api/v1/admin/",)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if not path.startswith(self.API_PREFIX) or path.startswith(self.EXEMPT_PREFIXES):
            return await call_next(request)

        if is_admin():
            return await call_next(request)

        try:
            async with get_db_context() as db:
                current = await get_settings_service().get_cached(db)
        except Exception:
            logger.exception("Could not load settings for maintenance check")
            return await call_next(request)

        if current.maintenance_mode:
            return JSONResponse(
                status_code=503,
                content={
                    "status": "error",
                    "message": f"{current.site_name} is under maintenance. Please try again later.",
                },
            )

        return await call_next(request)

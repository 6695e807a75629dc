"""Middleware exports."""

from pkasla.middleware.auth import AuthMiddleware
from pkasla.middleware.maintenance import MaintenanceMiddleware

__all__ = ["AuthMiddleware", "MaintenanceMiddleware"]

"""SQLAlchemy models."""

from pkasla.models.base import Base, BaseModel, TimestampMixin
from pkasla.models.site_settings import SENSITIVE_FIELDS, SETTINGS_ID, SiteSettings
from pkasla.models.user import Role, User

__all__ = [
    # Base
    "Base",
    "BaseModel",
    "TimestampMixin",
    # Settings
    "SiteSettings",
    "SETTINGS_ID",
    "SENSITIVE_FIELDS",
    # User
    "User",
    "Role",
]

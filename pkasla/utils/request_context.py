"""Request context management using contextvars.

Tracks the authenticated user and role for the duration of a request.
"""

import contextvars
import uuid

from pkasla.exceptions import UserContextError
from pkasla.models.user import Role

_current_user_id: contextvars.ContextVar[uuid.UUID | None] = contextvars.ContextVar(
    "current_user_id", default=None
)
_current_user_role: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "current_user_role", default=None
)


# === User Context ===

def get_current_user_id() -> uuid.UUID:
    """Get the current user ID.

    Raises:
        UserContextError: If user context is not set
    """
    uid = _current_user_id.get()
    if uid is None:
        raise UserContextError("User context is not set")
    return uid


def get_current_user_id_or_none() -> uuid.UUID | None:
    """Get the current user ID or None if not set."""
    return _current_user_id.get()


def set_current_user_id(uid: uuid.UUID | None) -> None:
    """Set the current user ID."""
    _current_user_id.set(uid)


# === Role Context ===

def get_current_user_role() -> str | None:
    """Get the current user's role."""
    return _current_user_role.get()


def set_current_user_role(role: str | None) -> None:
    """Set the current user's role."""
    _current_user_role.set(role)


def clear_all_context() -> None:
    """Clear all context variables.

    Call this at the end of each request to prevent context leakage.
    """
    _current_user_id.set(None)
    _current_user_role.set(None)


def is_admin() -> bool:
    """Check if the current user is a platform admin."""
    return get_current_user_role() == Role.ADMIN.value

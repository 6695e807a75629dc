"""Role-based permission decorators."""

from functools import wraps
from typing import Callable

from pkasla.exceptions import ForbiddenException, UnauthorizedException
from pkasla.models.user import Role
from pkasla.utils.request_context import get_current_user_id_or_none, get_current_user_role


def require_role(*allowed_roles: Role | str) -> Callable:
    """Decorator that enforces role-based access control.

    Usage:
        @router.put("/settings")
        @require_role(Role.ADMIN)
        async def update_settings(...):
            ...

    Admins pass every role check.
    """
    role_values = {role.value if isinstance(role, Role) else role for role in allowed_roles}

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            if get_current_user_id_or_none() is None:
                raise UnauthorizedException()

            current_role = get_current_user_role()
            if current_role == Role.ADMIN.value:
                return await func(*args, **kwargs)

            if current_role not in role_values:
                raise ForbiddenException()

            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_admin() -> Callable:
    """Decorator that requires the ADMIN role."""
    return require_role(Role.ADMIN)


def require_authenticated() -> Callable:
    """Decorator that requires any authenticated user."""
    return require_role(Role.ADMIN, Role.USER)

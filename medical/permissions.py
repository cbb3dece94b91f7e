"""
Role based access control for the clinic API.

Every endpoint declares the role it needs through :func:`HasRole`
instead of comparing role strings in the view body. Row ownership for
student-scoped reads goes through :func:`ensure_can_read_roll`.
"""
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission

from .models import User


def HasRole(*roles: str) -> type[BasePermission]:
    """Build a permission class admitting authenticated users with one of ``roles``."""

    class _HasRole(BasePermission):
        message = 'Forbidden.'

        def has_permission(self, request, view) -> bool:  # type: ignore[override]
            user = getattr(request, "user", None)
            return bool(user and user.is_authenticated and getattr(user, "role", None) in roles)

    _HasRole.__name__ = f"HasRole[{','.join(roles)}]"
    return _HasRole


IsMedicalStaff = HasRole(User.ROLE_STAFF)
IsStudent = HasRole(User.ROLE_STUDENT)


def ensure_can_read_roll(user, roll_no: str) -> None:
    """Students may only read their own rows; staff may read anyone's."""
    if getattr(user, "role", None) == User.ROLE_STAFF:
        return
    if getattr(user, "role", None) == User.ROLE_STUDENT and user.roll_no == roll_no:
        return
    raise PermissionDenied('Forbidden.')

# ===========================================================
# users/permissions.py
# ===========================================================
import logging

from rest_framework import permissions

logger = logging.getLogger(__name__)


def is_admin(user):
    return bool(user and user.is_authenticated and getattr(user, "role", "") == "admin" and user.company_id)


def is_staff_member(user):
    return bool(user and user.is_authenticated and getattr(user, "role", "") == "staff" and user.company_id)


# ===========================================================
# IsCompanyAdmin
# ===========================================================
class IsCompanyAdmin(permissions.BasePermission):
    """
    Grants access to admins attached to a company.
    Denies staff and users without a company.
    """

    message = "Only company administrators can perform this action."

    def has_permission(self, request, view):
        allowed = is_admin(request.user)
        if not allowed and request.user and request.user.is_authenticated:
            logger.debug(f"Admin access denied for {request.user.email} on {view.__class__.__name__}")
        return allowed

    def has_object_permission(self, request, view, obj):
        company_id = getattr(obj, "company_id", None)
        if company_id is None and hasattr(obj, "staff"):
            company_id = obj.staff.company_id
        return company_id == request.user.company_id


# ===========================================================
# IsCompanyStaff
# ===========================================================
class IsCompanyStaff(permissions.BasePermission):
    """Grants access to staff members attached to a company."""

    message = "Only staff members can perform this action."

    def has_permission(self, request, view):
        return is_staff_member(request.user)


# ===========================================================
# IsCompanyAdminOrReadOnly
# ===========================================================
class IsCompanyAdminOrReadOnly(permissions.BasePermission):
    """Company members may read; only company admins may write."""

    message = "Only company administrators can modify these settings."

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated and user.company_id):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_admin(user)


# ===========================================================
# IsCompanyMember
# ===========================================================
class IsCompanyMember(permissions.BasePermission):
    """Any authenticated user that belongs to a company."""

    message = "Your account is not attached to a company."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.company_id)

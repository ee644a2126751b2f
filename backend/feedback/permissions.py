from rest_framework import permissions
import logging

logger = logging.getLogger(__name__)


# ===========================================================
# IsThreadParticipant
# ===========================================================
class IsThreadParticipant(permissions.BasePermission):
    """
    Object-level permission for comments and questions:
    ✅ Admins of the evaluated staff member's company
    ✅ The evaluated staff member (read, and own questions)
    ❌ Everyone else
    """

    message = "You do not have access to this evaluation thread."

    def has_object_permission(self, request, view, obj):
        user = request.user
        staff = obj.evaluation.staff

        if user.is_admin and user.company_id == staff.company_id:
            return True
        if staff == user:
            return True

        logger.debug(f"Thread access denied for {user.email} on {obj.__class__.__name__} {obj.pk}")
        return False

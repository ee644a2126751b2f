# ===========================================================
# goals/views.py
# ===========================================================
import logging

from rest_framework import filters, viewsets
from rest_framework.exceptions import PermissionDenied

from notifications.models import Notification
from notifications.services import notify
from users.permissions import IsCompanyMember
from .models import StaffGoal
from .serializers import AdminGoalSerializer, StaffGoalSerializer

logger = logging.getLogger(__name__)


class StaffGoalViewSet(viewsets.ModelViewSet):
    """
    Staff: CRUD on their own goals.
    Admin: list / retrieve company goals and update status or interview status.

    Query params: status, interview_status, period_year, period_quarter, staff (admin)
    """

    permission_classes = [IsCompanyMember]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["goal_title", "goal_description", "staff__full_name"]
    ordering_fields = ["created_at", "target_date", "achievement_rate"]
    ordering = ["-created_at"]
    http_method_names = ["get", "post", "put", "patch", "delete", "head", "options"]

    def get_serializer_class(self):
        return AdminGoalSerializer if self.request.user.is_admin else StaffGoalSerializer

    def get_queryset(self):
        user = self.request.user
        if user.is_admin:
            qs = StaffGoal.objects.filter(staff__company=user.company).select_related("staff")
        else:
            qs = StaffGoal.objects.filter(staff=user)

        params = self.request.query_params
        if params.get("status") in dict(StaffGoal.STATUS_CHOICES):
            qs = qs.filter(status=params["status"])
        if params.get("interview_status") in dict(StaffGoal.INTERVIEW_STATUS_CHOICES):
            qs = qs.filter(interview_status=params["interview_status"])
        if params.get("period_year", "").isdigit():
            qs = qs.filter(period_year=int(params["period_year"]))
        if params.get("period_quarter", "").isdigit():
            qs = qs.filter(period_quarter=int(params["period_quarter"]))
        if user.is_admin and params.get("staff", "").isdigit():
            qs = qs.filter(staff_id=int(params["staff"]))
        return qs

    def perform_create(self, serializer):
        if self.request.user.is_admin:
            raise PermissionDenied("Goals are created by staff members.")
        goal = serializer.save(staff=self.request.user)
        logger.info(f"Goal {goal.pk} created by {self.request.user.email}")

    def perform_update(self, serializer):
        user = self.request.user
        previous = serializer.instance.status, serializer.instance.interview_status
        goal = serializer.save()

        if user.is_admin and (goal.status, goal.interview_status) != previous:
            logger.info(f"Goal {goal.pk} reviewed by {user.email}: {goal.status}/{goal.interview_status}")
            notify(
                goal.staff,
                f"Your goal \"{goal.goal_title}\" is now {goal.get_status_display().lower()} "
                f"(interview {goal.get_interview_status_display().lower()}).",
                category=Notification.CATEGORY_GOAL,
                link=f"/my-goals/{goal.pk}",
            )

    def perform_destroy(self, instance):
        if self.request.user.is_admin:
            raise PermissionDenied("Admins cannot delete staff goals.")
        logger.info(f"Goal {instance.pk} deleted by {self.request.user.email}")
        instance.delete()

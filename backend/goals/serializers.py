# ===========================================================
# goals/serializers.py
# ===========================================================
from rest_framework import serializers

from users.serializers import UserSummarySerializer
from .models import StaffGoal


class StaffGoalSerializer(serializers.ModelSerializer):
    """Staff view: own goals, every field but the interview status is editable."""

    class Meta:
        model = StaffGoal
        fields = [
            "id",
            "goal_title",
            "goal_description",
            "target_date",
            "achievement_rate",
            "status",
            "interview_status",
            "period_year",
            "period_quarter",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "interview_status", "created_at", "updated_at"]
        extra_kwargs = {
            "period_year": {"required": False},
            "period_quarter": {"required": False},
        }

    def validate_goal_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Goal title is required.")
        return value


class AdminGoalSerializer(serializers.ModelSerializer):
    """Admin view: read the goal, change its status and interview status."""

    staff = UserSummarySerializer(read_only=True)

    class Meta:
        model = StaffGoal
        fields = [
            "id",
            "staff",
            "goal_title",
            "goal_description",
            "target_date",
            "achievement_rate",
            "status",
            "interview_status",
            "period_year",
            "period_quarter",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "staff",
            "goal_title",
            "goal_description",
            "target_date",
            "achievement_rate",
            "period_year",
            "period_quarter",
            "created_at",
            "updated_at",
        ]

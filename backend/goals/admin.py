# ===========================================================
# goals/admin.py
# ===========================================================
from django.contrib import admin

from .models import StaffGoal


@admin.register(StaffGoal)
class StaffGoalAdmin(admin.ModelAdmin):
    list_display = ("goal_title", "staff", "period_year", "period_quarter", "status", "interview_status", "achievement_rate")
    list_filter = ("status", "interview_status", "period_year", "period_quarter")
    search_fields = ("goal_title", "staff__full_name", "staff__email")
    list_select_related = ("staff",)

# ===========================================================
# reports/admin.py
# ===========================================================
from django.contrib import admin

from .models import AnnualEvaluation, ProductivityData, QuarterlyReport


@admin.register(QuarterlyReport)
class QuarterlyReportAdmin(admin.ModelAdmin):
    list_display = ("staff", "year", "quarter", "average_score", "evaluation_count", "updated_at")
    list_filter = ("year", "quarter")
    search_fields = ("staff__full_name", "staff__email")
    ordering = ("-year", "-quarter")


@admin.register(AnnualEvaluation)
class AnnualEvaluationAdmin(admin.ModelAdmin):
    list_display = ("staff", "year", "average_score", "rank", "evaluation_count", "updated_at")
    list_filter = ("year", "rank")
    search_fields = ("staff__full_name", "staff__email")


@admin.register(ProductivityData)
class ProductivityDataAdmin(admin.ModelAdmin):
    list_display = ("staff", "date", "sales_amount", "contracts_count", "tasks_completed", "attendance_rate")
    list_filter = ("date", "external_source")
    search_fields = ("staff__full_name",)
    date_hierarchy = "date"

# ===========================================================
# evaluations/admin.py
# ===========================================================
from django.contrib import admin

from .models import (
    Evaluation,
    EvaluationCategory,
    EvaluationCycle,
    EvaluationItemMaster,
    EvaluationResponse,
    EvaluationResponseItem,
    RankSetting,
)


@admin.register(EvaluationCycle)
class EvaluationCycleAdmin(admin.ModelAdmin):
    list_display = ("cycle_name", "company", "start_date", "end_date", "status")
    list_filter = ("status", "company")
    search_fields = ("cycle_name", "company__company_name")


@admin.register(EvaluationCategory)
class EvaluationCategoryAdmin(admin.ModelAdmin):
    list_display = ("category_label", "category_key", "company", "display_order", "is_active")
    list_filter = ("is_active", "company")


@admin.register(EvaluationItemMaster)
class EvaluationItemMasterAdmin(admin.ModelAdmin):
    list_display = ("item_name", "item_key", "category", "min_score", "max_score", "company", "is_active")
    list_filter = ("category", "is_active", "company")
    search_fields = ("item_name", "item_key")


@admin.register(RankSetting)
class RankSettingAdmin(admin.ModelAdmin):
    list_display = ("rank_name", "min_score", "amount", "company", "display_order")
    list_filter = ("company",)


class EvaluationResponseItemInline(admin.TabularInline):
    model = EvaluationResponseItem
    extra = 0
    readonly_fields = ("item_key", "category", "item_name", "score", "min_score", "max_score", "comment")
    can_delete = False


@admin.register(EvaluationResponse)
class EvaluationResponseAdmin(admin.ModelAdmin):
    list_display = ("evaluation", "admin", "total_score", "submitted_at")
    list_filter = ("submitted_at",)
    search_fields = ("evaluation__staff__full_name", "admin__full_name")
    inlines = [EvaluationResponseItemInline]


class EvaluationResponseInline(admin.TabularInline):
    model = EvaluationResponse
    extra = 0
    fields = ("admin", "total_score", "submitted_at")
    readonly_fields = fields
    can_delete = False
    show_change_link = True


@admin.register(Evaluation)
class EvaluationAdmin(admin.ModelAdmin):
    list_display = ("staff", "evaluation_period", "status", "total_score", "rank", "cycle")
    list_filter = ("status", "rank", "evaluation_year", "evaluation_month")
    search_fields = ("staff__full_name", "staff__email", "evaluation_period")
    readonly_fields = ("evaluation_period", "completed_at", "created_at", "updated_at")
    ordering = ("-evaluation_year", "-evaluation_month")
    inlines = [EvaluationResponseInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("staff", "cycle")

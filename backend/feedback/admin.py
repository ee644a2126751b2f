# ===========================================================
# feedback/admin.py
# ===========================================================
from django.contrib import admin

from .models import AdminComment, EvaluationQuestion


@admin.register(AdminComment)
class AdminCommentAdmin(admin.ModelAdmin):
    list_display = ("evaluation", "admin", "short_comment", "created_at")
    search_fields = ("comment", "admin__full_name", "evaluation__staff__full_name")
    list_filter = ("created_at",)
    raw_id_fields = ("evaluation", "admin")

    def short_comment(self, obj):
        return obj.comment[:50]

    short_comment.short_description = "Comment"


@admin.register(EvaluationQuestion)
class EvaluationQuestionAdmin(admin.ModelAdmin):
    list_display = ("staff", "evaluation", "is_answered", "admin", "answered_at", "created_at")
    search_fields = ("question", "answer", "staff__full_name")
    list_filter = ("answered_at",)
    raw_id_fields = ("evaluation", "staff", "admin")
    readonly_fields = ("created_at", "updated_at")

    def is_answered(self, obj):
        return obj.is_answered

    is_answered.boolean = True

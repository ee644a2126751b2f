# ===============================================
# notifications/admin.py
# ===============================================
from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("id", "recipient", "category", "message", "is_read", "auto_delete", "created_at", "read_at")
    list_filter = ("category", "is_read", "auto_delete", "created_at")
    search_fields = ("recipient__email", "recipient__full_name", "message")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "read_at")
    list_select_related = ("recipient",)

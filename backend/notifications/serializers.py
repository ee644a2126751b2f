# ===========================================================
# notifications/serializers.py
# ===========================================================
from rest_framework import serializers

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    status_display = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField(format="%Y-%m-%d %H:%M:%S", read_only=True)
    read_at = serializers.DateTimeField(format="%Y-%m-%d %H:%M:%S", read_only=True)
    time_since_created = serializers.ReadOnlyField()

    class Meta:
        model = Notification
        fields = [
            "id",
            "message",
            "category",
            "link",
            "is_read",
            "status_display",
            "auto_delete",
            "created_at",
            "read_at",
            "time_since_created",
        ]
        read_only_fields = fields

    def get_status_display(self, obj):
        return "Read" if obj.is_read else "Unread"

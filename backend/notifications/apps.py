# ===============================================
# notifications/apps.py
# ===============================================
from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    """AppConfig for the Notifications module."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"
    verbose_name = "User Notifications"

    def ready(self):
        import notifications.signals  # noqa: F401

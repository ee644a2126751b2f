# ===============================================
# reports/apps.py
# ===============================================
from django.apps import AppConfig


class ReportsConfig(AppConfig):
    """AppConfig for the Reports module."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "reports"
    verbose_name = "Reports & Analytics"

    def ready(self):
        import reports.signals  # noqa: F401

# ===========================================================
# notifications/models.py
# ===========================================================
from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.timesince import timesince


class Notification(models.Model):
    """In-app notice shown in the bell menu of one user."""

    CATEGORY_EVALUATION = "evaluation"
    CATEGORY_COMMENT = "comment"
    CATEGORY_QUESTION = "question"
    CATEGORY_GOAL = "goal"
    CATEGORY_SYSTEM = "system"
    CATEGORY_CHOICES = [
        (CATEGORY_EVALUATION, "Evaluation"),
        (CATEGORY_COMMENT, "Comment"),
        (CATEGORY_QUESTION, "Question"),
        (CATEGORY_GOAL, "Goal"),
        (CATEGORY_SYSTEM, "System"),
    ]

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    message = models.CharField(max_length=500)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default=CATEGORY_SYSTEM, db_index=True)
    link = models.CharField(max_length=255, blank=True, default="", help_text="Frontend route to open.")

    is_read = models.BooleanField(default=False, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)
    auto_delete = models.BooleanField(default=False, help_text="Delete instead of keeping once read.")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        indexes = [models.Index(fields=["recipient", "is_read"])]

    def __str__(self):
        return f"{self.recipient} - {self.message[:40]}"

    @property
    def time_since_created(self):
        return f"{timesince(self.created_at)} ago"

    def mark_as_read(self):
        """Returns True when the notification was deleted instead of kept."""
        if self.auto_delete:
            self.delete()
            return True
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=["is_read", "read_at"])
        return False

    def mark_as_unread(self):
        self.is_read = False
        self.read_at = None
        self.save(update_fields=["is_read", "read_at"])

# ===========================================================
# goals/models.py
# ===========================================================
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


class StaffGoal(models.Model):
    """A staff member's goal for one quarter, reviewed in an interview."""

    STATUS_CHOICES = [
        ("draft", "Draft"),
        ("submitted", "Submitted"),
        ("under_review", "Under review"),
        ("approved", "Approved"),
        ("active", "Active"),
        ("completed", "Completed"),
        ("cancelled", "Cancelled"),
        ("abandoned", "Abandoned"),
        ("before_interview", "Before interview"),
        ("after_interview", "After interview"),
    ]
    OPEN_STATUSES = ("draft", "submitted", "under_review", "approved", "active", "before_interview", "after_interview")

    INTERVIEW_PENDING = "pending"
    INTERVIEW_SCHEDULED = "scheduled"
    INTERVIEW_COMPLETED = "completed"
    INTERVIEW_STATUS_CHOICES = [
        (INTERVIEW_PENDING, "Pending"),
        (INTERVIEW_SCHEDULED, "Scheduled"),
        (INTERVIEW_COMPLETED, "Completed"),
    ]

    staff = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="goals",
    )
    goal_title = models.CharField(max_length=200)
    goal_description = models.TextField(blank=True, default="")
    target_date = models.DateField(null=True, blank=True)
    achievement_rate = models.PositiveSmallIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        help_text="Progress in percent.",
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active", db_index=True)
    interview_status = models.CharField(
        max_length=20,
        choices=INTERVIEW_STATUS_CHOICES,
        default=INTERVIEW_PENDING,
        db_index=True,
    )
    period_year = models.PositiveSmallIntegerField()
    period_quarter = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(4)])

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Staff Goal"
        verbose_name_plural = "Staff Goals"
        indexes = [
            models.Index(fields=["staff", "period_year", "period_quarter"]),
        ]

    def __str__(self):
        return f"{self.goal_title} ({self.staff})"

    def save(self, *args, **kwargs):
        if not self.period_year or not self.period_quarter:
            day = self.target_date or timezone.localdate()
            self.period_year = self.period_year or day.year
            self.period_quarter = self.period_quarter or (day.month - 1) // 3 + 1
        super().save(*args, **kwargs)

    @property
    def is_open(self):
        return self.status in self.OPEN_STATUSES

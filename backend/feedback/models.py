# ===========================================================
# feedback/models.py
# ===========================================================
from django.conf import settings
from django.db import models
from django.utils import timezone


# ===========================================================
# ADMIN COMMENT
# ===========================================================
class AdminComment(models.Model):
    """Admin feedback attached to a staff member's monthly evaluation."""

    evaluation = models.ForeignKey(
        "evaluations.Evaluation",
        on_delete=models.CASCADE,
        related_name="admin_comments",
    )
    admin = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="admin_comments",
    )
    comment = models.TextField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Admin Comment"
        verbose_name_plural = "Admin Comments"
        indexes = [models.Index(fields=["evaluation", "-created_at"])]

    def __str__(self):
        return f"{self.admin} on {self.evaluation.evaluation_period}: {self.comment[:30]}"


# ===========================================================
# EVALUATION QUESTION
# ===========================================================
class EvaluationQuestion(models.Model):
    """A staff question about one of their evaluations and the admin's answer."""

    evaluation = models.ForeignKey(
        "evaluations.Evaluation",
        on_delete=models.CASCADE,
        related_name="questions",
    )
    staff = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="evaluation_questions",
    )
    question = models.TextField()
    answer = models.TextField(blank=True, default="")
    admin = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="answered_questions",
        help_text="Admin who answered.",
    )
    answered_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Evaluation Question"
        verbose_name_plural = "Evaluation Questions"
        indexes = [models.Index(fields=["staff", "answered_at"])]

    def __str__(self):
        return f"{self.staff}: {self.question[:40]}"

    @property
    def is_answered(self):
        return self.answered_at is not None

    def record_answer(self, admin, answer):
        self.answer = answer
        self.admin = admin
        self.answered_at = timezone.now()
        self.save(update_fields=["answer", "admin", "answered_at", "updated_at"])

# ===========================================================
# reports/models.py
# ===========================================================
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class QuarterlyReport(models.Model):
    """
    Average of a staff member's three completed months in a calendar quarter.
    Regenerated whenever one of those months is (re)completed.
    """

    staff = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="quarterly_reports",
    )
    year = models.PositiveSmallIntegerField()
    quarter = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(4)])
    average_score = models.FloatField()
    evaluation_count = models.PositiveSmallIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("staff", "year", "quarter")
        ordering = ["-year", "-quarter"]
        verbose_name = "Quarterly Report"
        verbose_name_plural = "Quarterly Reports"

    def __str__(self):
        return f"{self.staff} {self.year} Q{self.quarter} ({self.average_score})"


class AnnualEvaluation(models.Model):
    """Calendar-year average and rank of a staff member's completed months."""

    staff = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="annual_evaluations",
    )
    year = models.PositiveSmallIntegerField()
    average_score = models.FloatField()
    rank = models.CharField(max_length=10, blank=True, default="")
    evaluation_count = models.PositiveSmallIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("staff", "year")
        ordering = ["-year"]
        verbose_name = "Annual Evaluation"
        verbose_name_plural = "Annual Evaluations"

    def __str__(self):
        return f"{self.staff} {self.year} [{self.rank}]"


class ProductivityData(models.Model):
    """Daily productivity figures, entered by staff or imported from another system."""

    staff = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="productivity_data",
    )
    date = models.DateField()
    sales_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    contracts_count = models.PositiveIntegerField(default=0)
    tasks_completed = models.PositiveIntegerField(default=0)
    attendance_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    external_source = models.CharField(max_length=100, blank=True, default="", help_text="Import source, if any")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date"]
        verbose_name = "Productivity Data"
        verbose_name_plural = "Productivity Data"
        indexes = [models.Index(fields=["staff", "date"])]

    def __str__(self):
        return f"{self.staff} {self.date}"

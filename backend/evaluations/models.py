# ===========================================================
# evaluations/models.py
# ===========================================================
from datetime import date

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import F, Q

from .periods import period_label


# -----------------------------------------------------------
# Helper functions
# -----------------------------------------------------------
def fiscal_year_q(fiscal_year, prefix=""):
    """Q filter selecting evaluation year/month pairs inside `fiscal_year`."""
    year_field = f"{prefix}evaluation_year"
    month_field = f"{prefix}evaluation_month"
    query = Q(**{year_field: fiscal_year.start_year, f"{month_field}__gte": fiscal_year.start_month})
    if fiscal_year.start_month > 1:
        query |= Q(**{year_field: fiscal_year.start_year + 1, f"{month_field}__lt": fiscal_year.start_month})
    return query


def date_range_q(start_date, end_date, prefix=""):
    """Q filter selecting evaluation months from start_date's month to end_date's month."""
    if (start_date.year, start_date.month) > (end_date.year, end_date.month):
        return Q(pk__in=[])

    year_field = f"{prefix}evaluation_year"
    month_field = f"{prefix}evaluation_month"
    after_start = Q(**{f"{year_field}__gt": start_date.year}) | Q(
        **{year_field: start_date.year, f"{month_field}__gte": start_date.month}
    )
    before_end = Q(**{f"{year_field}__lt": end_date.year}) | Q(
        **{year_field: end_date.year, f"{month_field}__lte": end_date.month}
    )
    return after_start & before_end


# ===========================================================
# EVALUATION CYCLE
# ===========================================================
class EvaluationCycle(models.Model):
    STATUS_PLANNING = "planning"
    STATUS_ACTIVE = "active"
    STATUS_COMPLETED = "completed"
    STATUS_CHOICES = [
        (STATUS_PLANNING, "Planning"),
        (STATUS_ACTIVE, "Active"),
        (STATUS_COMPLETED, "Completed"),
    ]

    company = models.ForeignKey("users.Company", on_delete=models.CASCADE, related_name="evaluation_cycles")
    cycle_name = models.CharField(max_length=100)
    start_date = models.DateField()
    end_date = models.DateField()
    trial_date = models.DateField(null=True, blank=True, help_text="Trial evaluation date.")
    implementation_date = models.DateField(null=True, blank=True)
    final_date = models.DateField(null=True, blank=True, help_text="Final evaluation date.")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PLANNING, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date"]
        verbose_name = "Evaluation Cycle"
        verbose_name_plural = "Evaluation Cycles"
        indexes = [models.Index(fields=["company", "start_date", "end_date"])]

    def __str__(self):
        return f"{self.cycle_name} ({self.start_date} - {self.end_date})"

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({"end_date": "End date must be on or after the start date."})

    def contains(self, day):
        return self.start_date <= day <= self.end_date

    @classmethod
    def for_month(cls, company, year, month):
        """Cycle whose date range includes the first day of the month."""
        first_day = date(year, month, 1)
        return (
            cls.objects.filter(company=company, start_date__lte=first_day, end_date__gte=first_day)
            .order_by("-start_date")
            .first()
        )

    @classmethod
    def default_for(cls, company):
        """Active cycle, otherwise the most recent one."""
        cycles = cls.objects.filter(company=company)
        return cycles.filter(status=cls.STATUS_ACTIVE).order_by("-start_date").first() or cycles.order_by("-start_date").first()


# ===========================================================
# CATEGORY & ITEM MASTERS
# ===========================================================
class EvaluationCategory(models.Model):
    company = models.ForeignKey("users.Company", on_delete=models.CASCADE, related_name="evaluation_categories")
    category_key = models.SlugField(max_length=50)
    category_label = models.CharField(max_length=100)
    display_order = models.PositiveSmallIntegerField(default=0)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["display_order", "id"]
        verbose_name = "Evaluation Category"
        verbose_name_plural = "Evaluation Categories"
        constraints = [
            models.UniqueConstraint(fields=["company", "category_key"], name="unique_company_category_key"),
        ]

    def __str__(self):
        return self.category_label


class EvaluationItemMaster(models.Model):
    company = models.ForeignKey("users.Company", on_delete=models.CASCADE, related_name="evaluation_items")
    item_key = models.CharField(max_length=50)
    category = models.CharField(max_length=50, help_text="category_key of an EvaluationCategory.")
    item_name = models.CharField(max_length=100)
    min_score = models.IntegerField(default=0)
    max_score = models.IntegerField()
    description = models.TextField(blank=True, default="")
    display_order = models.PositiveSmallIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["display_order", "id"]
        verbose_name = "Evaluation Item"
        verbose_name_plural = "Evaluation Items"
        constraints = [
            models.UniqueConstraint(fields=["company", "item_key"], name="unique_company_item_key"),
        ]

    def __str__(self):
        return f"{self.item_name} ({self.min_score}..{self.max_score})"

    def clean(self):
        if self.max_score is not None and self.min_score is not None and self.min_score > self.max_score:
            raise ValidationError({"max_score": "Max score must be greater than or equal to min score."})


class RankSetting(models.Model):
    company = models.ForeignKey("users.Company", on_delete=models.CASCADE, related_name="rank_settings")
    rank_name = models.CharField(max_length=10)
    min_score = models.FloatField(help_text="Lowest average score that earns this rank.")
    amount = models.IntegerField(default=0, help_text="Monthly reward (negative for deductions).")
    display_order = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["display_order", "-min_score"]
        verbose_name = "Rank Setting"
        verbose_name_plural = "Rank Settings"
        constraints = [
            models.UniqueConstraint(fields=["company", "rank_name"], name="unique_company_rank_name"),
        ]

    def __str__(self):
        return f"{self.rank_name} >= {self.min_score}"


# ===========================================================
# MONTHLY EVALUATION
# ===========================================================
class EvaluationQuerySet(models.QuerySet):
    def completed(self):
        return self.filter(status=Evaluation.STATUS_COMPLETED)

    def for_company(self, company):
        return self.filter(staff__company=company)

    def in_fiscal_year(self, fiscal_year):
        return self.filter(fiscal_year_q(fiscal_year))

    def between(self, start_date, end_date):
        return self.filter(date_range_q(start_date, end_date))


class Evaluation(models.Model):
    """
    One record per staff member per month. Derived scores and the rank
    are only populated once every required admin has submitted.
    """

    STATUS_DRAFT = "draft"
    STATUS_SUBMITTED = "submitted"
    STATUS_COMPLETED = "completed"
    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_SUBMITTED, "Submitted"),
        (STATUS_COMPLETED, "Completed"),
    ]

    staff = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="evaluations",
        help_text="Staff member being evaluated.",
    )
    cycle = models.ForeignKey(
        EvaluationCycle,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="evaluations",
    )

    evaluation_year = models.PositiveSmallIntegerField()
    evaluation_month = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    evaluation_period = models.CharField(max_length=7, blank=True, default="", help_text="YYYY-MM")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)

    # -------------------------------------------------------
    # Computed Fields (set on completion)
    # -------------------------------------------------------
    total_score = models.FloatField(null=True, blank=True, help_text="Average of the admins' totals.")
    average_score = models.FloatField(null=True, blank=True)
    performance_score = models.FloatField(null=True, blank=True)
    behavior_score = models.FloatField(null=True, blank=True)
    growth_score = models.FloatField(null=True, blank=True)
    rank = models.CharField(max_length=10, blank=True, default="")

    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = EvaluationQuerySet.as_manager()

    class Meta:
        ordering = ["-evaluation_year", "-evaluation_month", "staff_id"]
        verbose_name = "Evaluation"
        verbose_name_plural = "Evaluations"
        indexes = [
            models.Index(fields=["evaluation_year", "evaluation_month"]),
            models.Index(fields=["status"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["staff", "evaluation_year", "evaluation_month"],
                name="unique_staff_evaluation_month",
            )
        ]

    def __str__(self):
        return f"{self.staff} {self.evaluation_period} [{self.status}]"

    def save(self, *args, **kwargs):
        self.evaluation_period = period_label(self.evaluation_year, self.evaluation_month)
        super().save(*args, **kwargs)

    @property
    def is_completed(self):
        return self.status == self.STATUS_COMPLETED

    @property
    def quarter(self):
        return (self.evaluation_month - 1) // 3 + 1

    def clear_results(self):
        self.total_score = None
        self.average_score = None
        self.performance_score = None
        self.behavior_score = None
        self.growth_score = None
        self.rank = ""
        self.completed_at = None


# ===========================================================
# PER-ADMIN RESPONSE
# ===========================================================
class EvaluationResponseQuerySet(models.QuerySet):
    def counted(self):
        """Submitted responses whose author is still an active admin of the staff member's company."""
        return self.filter(
            submitted_at__isnull=False,
            admin__role="admin",
            admin__is_active=True,
            admin__company=F("evaluation__staff__company"),
        )


class EvaluationResponse(models.Model):
    """One admin's scoring of one monthly evaluation."""

    evaluation = models.ForeignKey(Evaluation, on_delete=models.CASCADE, related_name="responses")
    admin = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="evaluation_responses",
    )
    total_score = models.FloatField(default=0)
    performance_score = models.FloatField(default=0)
    behavior_score = models.FloatField(default=0)
    growth_score = models.FloatField(default=0)
    submitted_at = models.DateTimeField(null=True, blank=True, help_text="Empty while the response is a draft.")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = EvaluationResponseQuerySet.as_manager()

    class Meta:
        ordering = ["created_at"]
        verbose_name = "Evaluation Response"
        verbose_name_plural = "Evaluation Responses"
        constraints = [
            models.UniqueConstraint(fields=["evaluation", "admin"], name="unique_evaluation_admin_response"),
        ]

    def __str__(self):
        state = "submitted" if self.is_submitted else "draft"
        return f"{self.admin} -> {self.evaluation} ({state})"

    @property
    def is_submitted(self):
        return self.submitted_at is not None


class EvaluationResponseItem(models.Model):
    response = models.ForeignKey(EvaluationResponse, on_delete=models.CASCADE, related_name="items")
    item_key = models.CharField(max_length=50)
    category = models.CharField(max_length=50)
    item_name = models.CharField(max_length=100)
    score = models.FloatField()
    min_score = models.IntegerField()
    max_score = models.IntegerField()
    comment = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["id"]
        verbose_name = "Evaluation Response Item"
        verbose_name_plural = "Evaluation Response Items"
        constraints = [
            models.UniqueConstraint(fields=["response", "item_key"], name="unique_response_item_key"),
        ]

    def __str__(self):
        return f"{self.item_name}: {self.score}"

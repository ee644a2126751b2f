# ===========================================================
# evaluations/services.py
# ===========================================================
# Multi-admin evaluation workflow.
#
# Every admin of the company scores a staff member for a month.
# The evaluation completes once the number of submitted responses
# reaches the required evaluator count; the completed record holds
# the average of the admins' totals and the rank it earns.
# ===========================================================
import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from .calculator import (
    DEFAULT_CATEGORIES,
    DEFAULT_EVALUATION_ITEMS,
    calculate_average_score,
    calculate_scores,
    determine_rank,
    validate_evaluation_form,
)
from .models import (
    Evaluation,
    EvaluationCategory,
    EvaluationCycle,
    EvaluationItemMaster,
    EvaluationResponse,
    EvaluationResponseItem,
    RankSetting,
)
from .periods import calculate_period
from .signals import evaluation_recalculated

logger = logging.getLogger(__name__)


# -----------------------------------------------------------
# Company configuration
# -----------------------------------------------------------
def seed_company_defaults(company, today=None):
    """Default categories, the standard 11 items and, when possible, the current cycle."""
    EvaluationCategory.objects.bulk_create([
        EvaluationCategory(company=company, **category) for category in DEFAULT_CATEGORIES
    ])
    EvaluationItemMaster.objects.bulk_create([
        EvaluationItemMaster(
            company=company,
            item_key=item.item_key,
            category=item.category,
            item_name=item.item_name,
            min_score=item.min_score,
            max_score=item.max_score,
            description=item.description,
            display_order=index,
        )
        for index, item in enumerate(DEFAULT_EVALUATION_ITEMS, start=1)
    ])

    if company.establishment_date:
        # a company not yet founded starts in period 1
        target = max(today or timezone.localdate(), company.establishment_date)
        period = calculate_period(company.establishment_date, target)
        EvaluationCycle.objects.create(
            company=company,
            cycle_name=period.period_name,
            start_date=period.start_date,
            end_date=period.end_date,
            status=EvaluationCycle.STATUS_ACTIVE,
        )

    logger.info(f"Seeded evaluation defaults for company {company.company_code}")


def company_items(company):
    """Active item masters, or the standard items for companies without any."""
    items = list(EvaluationItemMaster.objects.filter(company=company, is_active=True))
    return items or list(DEFAULT_EVALUATION_ITEMS)


def company_rank_settings(company):
    return list(RankSetting.objects.filter(company=company))


def required_evaluator_count(company):
    configured = getattr(settings, "REQUIRED_EVALUATORS", None)
    if configured:
        return configured
    return company.admins.count()


# -----------------------------------------------------------
# Completion
# -----------------------------------------------------------
def recalculate_evaluation(evaluation, required=None, rank_settings=None):
    """
    Re-derive status and results from the submitted responses. Only
    responses from current admins of the company count.

    Returns (evaluation, newly_completed).
    """
    company = evaluation.staff.company
    submitted = list(evaluation.responses.counted())
    required = required_evaluator_count(company) if required is None else required
    was_completed = evaluation.is_completed

    if required > 0 and len(submitted) >= required:
        if rank_settings is None:
            rank_settings = company_rank_settings(company)
        average = calculate_average_score([r.total_score for r in submitted])
        evaluation.average_score = average
        evaluation.total_score = average
        evaluation.performance_score = calculate_average_score([r.performance_score for r in submitted])
        evaluation.behavior_score = calculate_average_score([r.behavior_score for r in submitted])
        evaluation.growth_score = calculate_average_score([r.growth_score for r in submitted])
        evaluation.rank = determine_rank(average, rank_settings)
        evaluation.status = Evaluation.STATUS_COMPLETED
        evaluation.completed_at = evaluation.completed_at or timezone.now()
    else:
        evaluation.status = Evaluation.STATUS_SUBMITTED if submitted else Evaluation.STATUS_DRAFT
        evaluation.clear_results()

    evaluation.save()
    newly_completed = evaluation.is_completed and not was_completed

    if evaluation.is_completed or was_completed:
        transaction.on_commit(
            lambda: evaluation_recalculated.send(
                sender=Evaluation,
                evaluation=evaluation,
                newly_completed=newly_completed,
            )
        )

    return evaluation, newly_completed


# -----------------------------------------------------------
# Submission
# -----------------------------------------------------------
def _check_participants(admin, staff):
    if not getattr(admin, "is_admin", False) or not admin.company_id:
        raise PermissionDenied("Only company administrators can evaluate staff.")
    if not admin.same_company(staff):
        raise ValidationError({"staff": "Invalid staff member."})
    if not staff.is_staff_member or not staff.is_active:
        raise ValidationError({"staff": "Only active staff members can be evaluated."})


@transaction.atomic
def submit_evaluation(admin, staff, year, month, scores, comments=None, is_draft=False):
    """
    Save `admin`'s scores for `staff` in year/month and run the completion check.

    Returns (evaluation, response, newly_completed).
    """
    _check_participants(admin, staff)
    if not 1 <= month <= 12:
        raise ValidationError({"evaluation_month": "Month must be between 1 and 12."})

    company = staff.company
    items = company_items(company)
    is_valid, errors = validate_evaluation_form(scores, items)
    if not is_valid:
        raise ValidationError({"scores": errors})

    comments = comments or {}
    totals = calculate_scores(scores, items)

    evaluation, created = Evaluation.objects.select_for_update().get_or_create(
        staff=staff,
        evaluation_year=year,
        evaluation_month=month,
        defaults={"cycle": EvaluationCycle.for_month(company, year, month)},
    )
    if evaluation.cycle_id is None:
        evaluation.cycle = EvaluationCycle.for_month(company, year, month)

    response, _ = EvaluationResponse.objects.update_or_create(
        evaluation=evaluation,
        admin=admin,
        defaults={
            "total_score": totals.total_score,
            "performance_score": totals.performance_score,
            "behavior_score": totals.behavior_score,
            "growth_score": totals.growth_score,
            "submitted_at": None if is_draft else timezone.now(),
        },
    )

    response.items.all().delete()
    EvaluationResponseItem.objects.bulk_create([
        EvaluationResponseItem(
            response=response,
            item_key=item.item_key,
            category=item.category,
            item_name=item.item_name,
            score=scores[item.item_key],
            min_score=item.min_score,
            max_score=item.max_score,
            comment=(comments.get(item.item_key) or "").strip(),
        )
        for item in items
    ])

    evaluation, newly_completed = recalculate_evaluation(evaluation)

    logger.info(
        f"Evaluation {evaluation.evaluation_period} for {staff.email} "
        f"{'saved as draft' if is_draft else 'submitted'} by {admin.email} "
        f"(status={evaluation.status}, created={created})"
    )
    return evaluation, response, newly_completed


def get_admin_evaluation(admin, staff, year, month):
    """
    The month's evaluation together with `admin`'s own response only.

    Returns (evaluation, response); either may be None.
    """
    _check_participants(admin, staff)

    evaluation = (
        Evaluation.objects.filter(staff=staff, evaluation_year=year, evaluation_month=month)
        .select_related("staff", "cycle")
        .first()
    )
    if evaluation is None:
        return None, None

    response = (
        EvaluationResponse.objects.filter(evaluation=evaluation, admin=admin)
        .prefetch_related("items")
        .first()
    )
    return evaluation, response

# ===========================================================
# reports/services.py
# ===========================================================
# Rollups built from completed monthly evaluations:
# - Quarterly reports / annual evaluations (persisted)
# - Monthly, quarterly and annual (per cycle) overviews
# - Admin and staff dashboards, analytics
# - Productivity summary
# ===========================================================
import logging
import math
from datetime import timedelta

from django.conf import settings
from django.db.models import Avg, Count, Prefetch, Sum
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from evaluations.calculator import RANKS, calculate_annual_reward, calculate_average_score, determine_rank
from evaluations.models import Evaluation, EvaluationCycle, EvaluationResponse
from evaluations.periods import fiscal_year_range, period_label, quarter_months
from evaluations.services import company_rank_settings, required_evaluator_count
from feedback.models import EvaluationQuestion
from goals.models import StaffGoal
from .models import AnnualEvaluation, ProductivityData, QuarterlyReport

logger = logging.getLogger(__name__)

SCORE_RANGES = [
    ("90-100", 90),
    ("80-89", 80),
    ("70-79", 70),
    ("60-69", 60),
    ("<60", None),
]


# -----------------------------------------------------------
# Row helpers
# -----------------------------------------------------------
def staff_row(staff):
    return {
        "id": staff.id,
        "full_name": staff.full_name,
        "email": staff.email,
        "department": staff.department,
        "position": staff.position,
    }


def evaluation_row(evaluation):
    return {
        "id": evaluation.id,
        "staff_id": evaluation.staff_id,
        "staff_name": evaluation.staff.full_name,
        "department": evaluation.staff.department,
        "evaluation_year": evaluation.evaluation_year,
        "evaluation_month": evaluation.evaluation_month,
        "evaluation_period": evaluation.evaluation_period,
        "status": evaluation.status,
        "total_score": evaluation.total_score,
        "performance_score": evaluation.performance_score,
        "behavior_score": evaluation.behavior_score,
        "growth_score": evaluation.growth_score,
        "rank": evaluation.rank,
    }


def _rank_names(rank_settings):
    if rank_settings:
        return [s.rank_name for s in sorted(rank_settings, key=lambda s: s.min_score, reverse=True)]
    return list(RANKS)


def _rank_distribution(ranks, rank_settings):
    distribution = {name: 0 for name in _rank_names(rank_settings)}
    for rank in ranks:
        if rank:
            distribution[rank] = distribution.get(rank, 0) + 1
    return distribution


def _mean(values):
    values = [v for v in values if v is not None]
    return calculate_average_score(values) if values else None


def _completed_for(staff):
    return Evaluation.objects.completed().filter(staff=staff)


# ===========================================================
# QUARTERLY REPORT
# ===========================================================
def _quarter_evaluations(staff, year, quarter):
    return list(_completed_for(staff).filter(evaluation_year=year, evaluation_month__in=quarter_months(quarter)))


def generate_quarterly_report(staff, year, quarter):
    """Average the quarter's three completed months; fails unless all three are completed."""
    if quarter not in (1, 2, 3, 4):
        raise ValidationError({"quarter": "Quarter must be between 1 and 4."})

    evaluations = _quarter_evaluations(staff, year, quarter)
    if len(evaluations) < 3:
        raise ValidationError({
            "quarter": f"All three months of {year} Q{quarter} must be completed "
            f"({len(evaluations)}/3 completed)."
        })

    report, created = QuarterlyReport.objects.update_or_create(
        staff=staff,
        year=year,
        quarter=quarter,
        defaults={
            "average_score": calculate_average_score([e.total_score for e in evaluations]),
            "evaluation_count": len(evaluations),
        },
    )
    logger.info(f"Quarterly report {year} Q{quarter} for {staff.email} {'created' if created else 'updated'}")
    return report


def refresh_quarterly_report(staff, year, quarter):
    """Regenerate the report when the quarter is complete, otherwise drop a stale one."""
    if len(_quarter_evaluations(staff, year, quarter)) < 3:
        deleted, _ = QuarterlyReport.objects.filter(staff=staff, year=year, quarter=quarter).delete()
        if deleted:
            logger.info(f"Removed incomplete quarterly report {year} Q{quarter} for {staff.email}")
        return None
    return generate_quarterly_report(staff, year, quarter)


# ===========================================================
# ANNUAL EVALUATION
# ===========================================================
def generate_annual_evaluation(staff, year):
    """Average of the completed months of a calendar year, ranked with the company settings."""
    evaluations = list(_completed_for(staff).filter(evaluation_year=year))
    if not evaluations:
        raise ValidationError({"year": f"No completed evaluations in {year}."})

    average = calculate_average_score([e.total_score for e in evaluations])
    annual, created = AnnualEvaluation.objects.update_or_create(
        staff=staff,
        year=year,
        defaults={
            "average_score": average,
            "rank": determine_rank(average, company_rank_settings(staff.company)),
            "evaluation_count": len(evaluations),
        },
    )
    logger.info(f"Annual evaluation {year} for {staff.email} {'created' if created else 'updated'} [{annual.rank}]")
    return annual


def refresh_annual_evaluation(staff, year):
    if not _completed_for(staff).filter(evaluation_year=year).exists():
        AnnualEvaluation.objects.filter(staff=staff, year=year).delete()
        return None
    return generate_annual_evaluation(staff, year)


# ===========================================================
# OVERVIEWS (admin)
# ===========================================================
def monthly_overview(admin, year, month):
    company = admin.company
    required = required_evaluator_count(company)
    evaluations = {
        e.staff_id: e
        for e in Evaluation.objects.for_company(company)
        .filter(evaluation_year=year, evaluation_month=month)
        .prefetch_related(Prefetch("responses", queryset=EvaluationResponse.objects.counted()))
    }

    rows = []
    for staff in company.staff_members.order_by("full_name"):
        evaluation = evaluations.get(staff.id)
        submitted = list(evaluation.responses.all()) if evaluation else []
        rows.append({
            "staff": staff_row(staff),
            "evaluation_id": evaluation.id if evaluation else None,
            "status": evaluation.status if evaluation else "not_started",
            "total_score": evaluation.total_score if evaluation else None,
            "rank": evaluation.rank if evaluation else "",
            "my_submitted": any(r.admin_id == admin.id for r in submitted),
            "submitted_count": len(submitted),
            "total_required": required,
        })

    return {
        "year": year,
        "month": month,
        "period": period_label(year, month),
        "total_required": required,
        "total_staff": len(rows),
        "completed_count": sum(1 for r in rows if r["status"] == Evaluation.STATUS_COMPLETED),
        "my_pending_count": sum(1 for r in rows if not r["my_submitted"]),
        "staff": rows,
    }


def quarterly_overview(admin, year, quarter):
    company = admin.company
    months = quarter_months(quarter)

    reports = {
        r.staff_id: r
        for r in QuarterlyReport.objects.filter(staff__company=company, year=year, quarter=quarter)
    }
    completed = {}
    for evaluation in (
        Evaluation.objects.for_company(company)
        .completed()
        .filter(evaluation_year=year, evaluation_month__in=months)
        .order_by("evaluation_month")
    ):
        completed.setdefault(evaluation.staff_id, []).append(evaluation.evaluation_month)

    rows = []
    for staff in company.staff_members.order_by("full_name"):
        report = reports.get(staff.id)
        staff_months = completed.get(staff.id, [])
        rows.append({
            "staff": staff_row(staff),
            "report": {
                "id": report.id,
                "average_score": report.average_score,
                "evaluation_count": report.evaluation_count,
            } if report else None,
            "completed_months": staff_months,
            "has_all_months": len(staff_months) == 3,
        })

    total_staff = len(rows)
    completed_reports = sum(1 for r in rows if r["report"])
    return {
        "year": year,
        "quarter": quarter,
        "months": months,
        "total_staff": total_staff,
        "completed_reports": completed_reports,
        "progress": round(completed_reports / total_staff * 100) if total_staff else 0,
        "staff": rows,
    }


def annual_overview(admin, cycle=None):
    """Per staff results within a cycle's date range; defaults to the active or latest cycle."""
    company = admin.company
    cycle = cycle or EvaluationCycle.default_for(company)
    if cycle is None:
        return None

    by_staff = {}
    for evaluation in (
        Evaluation.objects.for_company(company)
        .completed()
        .between(cycle.start_date, cycle.end_date)
        .order_by("evaluation_year", "evaluation_month")
    ):
        by_staff.setdefault(evaluation.staff_id, []).append(evaluation)

    rows = []
    for staff in company.staff_members.order_by("full_name"):
        evaluations = by_staff.get(staff.id, [])
        rank = evaluations[-1].rank if evaluations else ""
        rows.append({
            "staff": staff_row(staff),
            "monthly_count": len(evaluations),
            "has_all_months": len(evaluations) == 12,
            "average_score": _mean([e.total_score for e in evaluations]),
            "rank": rank,
            "annual_reward": calculate_annual_reward(rank) if rank else 0,
            "periods": [e.evaluation_period for e in evaluations],
        })

    return {
        "cycle": {
            "id": cycle.id,
            "cycle_name": cycle.cycle_name,
            "start_date": cycle.start_date,
            "end_date": cycle.end_date,
            "status": cycle.status,
        },
        "total_staff": len(rows),
        "completed_evaluations": sum(1 for r in rows if r["has_all_months"]),
        "rank_distribution": _rank_distribution([r["rank"] for r in rows], company_rank_settings(company)),
        "staff": rows,
    }


# ===========================================================
# DASHBOARDS
# ===========================================================
def admin_dashboard(admin, today=None):
    today = today or timezone.localdate()
    company = admin.company
    staff_members = list(company.staff_members.order_by("full_name"))

    evaluations = list(
        Evaluation.objects.for_company(company)
        .filter(evaluation_year=today.year, evaluation_month=today.month)
        .select_related("staff")
    )
    completed = [e for e in evaluations if e.is_completed]
    completed_ids = {e.staff_id for e in completed}
    pending = [s for s in staff_members if s.id not in completed_ids]
    scores = [e.total_score or 0 for e in completed]

    top = sorted(completed, key=lambda e: e.total_score or 0, reverse=True)[: settings.TOP_PERFORMERS_COUNT]
    low = [
        e for e in completed
        if (e.total_score is not None and e.total_score < settings.LOW_PERFORMER_THRESHOLD) or e.rank == "D"
    ]

    interviews = {key: 0 for key, _ in StaffGoal.INTERVIEW_STATUS_CHOICES}
    for row in (
        StaffGoal.objects.filter(staff__company=company)
        .values("interview_status")
        .annotate(count=Count("id"))
    ):
        interviews[row["interview_status"]] = row["count"]

    total_staff = len(staff_members)
    return {
        "year": today.year,
        "month": today.month,
        "total_staff": total_staff,
        "completed_evaluations": len(completed),
        "pending_evaluations": len(pending),
        "completion_rate": round(len(completed) / total_staff * 100) if total_staff else 0,
        "rank_distribution": _rank_distribution([e.rank for e in completed], company_rank_settings(company)),
        "average_score": calculate_average_score(scores),
        "max_score": max(scores) if scores else 0,
        "min_score": min(scores) if scores else 0,
        "top_performers": [evaluation_row(e) for e in top],
        "low_performers": [evaluation_row(e) for e in low],
        "pending_staff": [staff_row(s) for s in pending],
        "goal_interviews": interviews,
        "unanswered_questions": EvaluationQuestion.objects.filter(
            staff__company=company, answered_at__isnull=True
        ).count(),
    }


def staff_dashboard(staff, today=None):
    today = today or timezone.localdate()
    fiscal_year = fiscal_year_range(today, settings.FISCAL_YEAR_START_MONTH)

    fiscal_evaluations = list(
        _completed_for(staff)
        .in_fiscal_year(fiscal_year)
        .order_by("-evaluation_year", "-evaluation_month")
    )
    recent = list(
        _completed_for(staff)
        .select_related("staff")
        .order_by("-evaluation_year", "-evaluation_month")[: settings.RECENT_EVALUATIONS_COUNT]
    )

    fiscal_average = _mean([e.total_score for e in fiscal_evaluations])
    fiscal_rank = None
    if fiscal_average is not None:
        fiscal_rank = determine_rank(fiscal_average, company_rank_settings(staff.company))

    latest = recent[0] if recent else None
    previous = recent[1] if len(recent) > 1 else None
    trend = None
    score_change = None
    if latest and previous and latest.total_score is not None and previous.total_score is not None:
        score_change = round(latest.total_score - previous.total_score, 2)
        trend = "up" if score_change > 0 else "down" if score_change < 0 else "flat"

    goals = StaffGoal.objects.filter(staff=staff)
    return {
        "fiscal_year": {
            "label": fiscal_year.label,
            "start_date": fiscal_year.start_date,
            "end_date": fiscal_year.end_date,
        },
        "fiscal_evaluation_count": len(fiscal_evaluations),
        "fiscal_average_score": fiscal_average,
        "fiscal_average_rank": fiscal_rank,
        "category_averages": {
            "performance": _mean([e.performance_score for e in fiscal_evaluations]),
            "behavior": _mean([e.behavior_score for e in fiscal_evaluations]),
            "growth": _mean([e.growth_score for e in fiscal_evaluations]),
        },
        "latest_evaluation": evaluation_row(latest) if latest else None,
        "previous_evaluation": evaluation_row(previous) if previous else None,
        "trend": trend,
        "score_change": score_change,
        "recent_evaluations": [evaluation_row(e) for e in recent],
        "active_goals": goals.filter(status="active").count(),
        "completed_goals": goals.filter(status="completed").count(),
        "total_goals": goals.count(),
        "unanswered_questions": EvaluationQuestion.objects.filter(staff=staff, answered_at__isnull=True).count(),
    }


# ===========================================================
# ANALYTICS
# ===========================================================
def _score_range(score):
    for label, floor in SCORE_RANGES:
        if floor is None or score >= floor:
            return label


def _population_std(values, mean):
    if not values:
        return 0
    return round(math.sqrt(sum((v - mean) ** 2 for v in values) / len(values)), 2)


def analytics(admin, today=None):
    """Fiscal-year statistics over the company's completed evaluations."""
    today = today or timezone.localdate()
    company = admin.company
    fiscal_year = fiscal_year_range(today, settings.FISCAL_YEAR_START_MONTH)

    evaluations = list(
        Evaluation.objects.for_company(company)
        .completed()
        .in_fiscal_year(fiscal_year)
        .select_related("staff")
        .order_by("evaluation_year", "evaluation_month")
    )
    scores = [e.total_score or 0 for e in evaluations]
    mean = sum(scores) / len(scores) if scores else 0

    departments = {}
    monthly = {}
    score_ranges = {label: 0 for label, _ in SCORE_RANGES}
    rank_distribution = {}
    for e in evaluations:
        score = e.total_score or 0
        score_ranges[_score_range(score)] += 1

        rank = e.rank or "Unrated"
        rank_distribution[rank] = rank_distribution.get(rank, 0) + 1

        dept = departments.setdefault(e.staff.department or "Unassigned", {
            "count": 0, "total": 0, "performance": 0, "behavior": 0, "growth": 0, "ranks": {},
        })
        dept["count"] += 1
        dept["total"] += score
        dept["performance"] += e.performance_score or 0
        dept["behavior"] += e.behavior_score or 0
        dept["growth"] += e.growth_score or 0
        dept["ranks"][rank] = dept["ranks"].get(rank, 0) + 1

        month = monthly.setdefault(e.evaluation_period, {
            "year": e.evaluation_year, "month": e.evaluation_month, "count": 0,
            "total": 0, "performance": 0, "behavior": 0, "growth": 0,
        })
        month["count"] += 1
        month["total"] += score
        month["performance"] += e.performance_score or 0
        month["behavior"] += e.behavior_score or 0
        month["growth"] += e.growth_score or 0

    def _averaged(bucket):
        count = bucket["count"]
        return {
            "count": count,
            "average_total": round(bucket["total"] / count, 2),
            "average_performance": round(bucket["performance"] / count, 2),
            "average_behavior": round(bucket["behavior"] / count, 2),
            "average_growth": round(bucket["growth"] / count, 2),
        }

    department_stats = [
        {"department": name, **_averaged(bucket), "rank_count": bucket["ranks"]}
        for name, bucket in sorted(departments.items())
    ]
    monthly_trend = [
        {"period": period, "year": bucket["year"], "month": bucket["month"], **_averaged(bucket)}
        for period, bucket in sorted(monthly.items())
    ]

    def _positive_mean(values):
        return _mean([v for v in values if v and v > 0]) or 0

    top = sorted(evaluations, key=lambda e: e.total_score or 0, reverse=True)
    return {
        "fiscal_year": {
            "label": fiscal_year.label,
            "start_date": fiscal_year.start_date,
            "end_date": fiscal_year.end_date,
        },
        "total_evaluations": len(evaluations),
        "average_score": round(mean, 2),
        "max_score": max(scores) if scores else 0,
        "min_score": min(scores) if scores else 0,
        "standard_deviation": _population_std(scores, mean),
        "department_stats": department_stats,
        "rank_distribution": rank_distribution,
        "score_ranges": score_ranges,
        "monthly_trend": monthly_trend,
        "category_averages": {
            "performance": _positive_mean([e.performance_score for e in evaluations]),
            "behavior": _positive_mean([e.behavior_score for e in evaluations]),
            "growth": _positive_mean([e.growth_score for e in evaluations]),
        },
        "top_performers": [evaluation_row(e) for e in top[: settings.ANALYTICS_TOP_PERFORMERS_COUNT]],
    }


# ===========================================================
# PRODUCTIVITY
# ===========================================================
def productivity_summary(staff, today=None):
    today = today or timezone.localdate()
    start = today - timedelta(days=settings.PRODUCTIVITY_WINDOW_DAYS - 1)
    rows = ProductivityData.objects.filter(staff=staff, date__gte=start, date__lte=today)

    totals = rows.aggregate(
        total_sales=Sum("sales_amount"),
        total_contracts=Sum("contracts_count"),
        total_tasks=Sum("tasks_completed"),
        average_attendance=Avg("attendance_rate"),
        record_count=Count("id"),
    )
    return {
        "start_date": start,
        "end_date": today,
        "record_count": totals["record_count"],
        "total_sales": float(totals["total_sales"] or 0),
        "total_contracts": totals["total_contracts"] or 0,
        "total_tasks": totals["total_tasks"] or 0,
        "average_attendance": round(float(totals["average_attendance"]), 2)
        if totals["average_attendance"] is not None else None,
    }

# ===========================================================
# reports/signals.py
# ===========================================================
import logging

from django.db import DatabaseError, transaction
from django.dispatch import receiver

from evaluations.periods import quarter_of_month
from evaluations.signals import evaluation_recalculated
from .services import refresh_annual_evaluation, refresh_quarterly_report

logger = logging.getLogger(__name__)


@receiver(evaluation_recalculated, dispatch_uid="refresh_staff_rollups")
def refresh_rollups(sender, evaluation, **kwargs):
    """Keep the quarter and year containing a (re)calculated evaluation in sync."""
    staff = evaluation.staff
    year = evaluation.evaluation_year
    try:
        with transaction.atomic():
            refresh_quarterly_report(staff, year, quarter_of_month(evaluation.evaluation_month))
            refresh_annual_evaluation(staff, year)
    except DatabaseError as exc:
        logger.warning(f"Rollup refresh failed for {staff.email} {evaluation.evaluation_period}: {exc}")

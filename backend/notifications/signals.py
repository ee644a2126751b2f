# ===========================================================
# notifications/signals.py
# ===========================================================
from django.dispatch import receiver

from evaluations.signals import evaluation_recalculated
from .models import Notification
from .services import notify


@receiver(evaluation_recalculated, dispatch_uid="notify_staff_evaluation_completed")
def notify_evaluation_completed(sender, evaluation, newly_completed=False, **kwargs):
    """Tell the staff member once all admins have finished the month's evaluation."""
    if not newly_completed:
        return

    notify(
        evaluation.staff,
        f"Your evaluation for {evaluation.evaluation_period} is complete: "
        f"{evaluation.total_score} points, rank {evaluation.rank}.",
        category=Notification.CATEGORY_EVALUATION,
        link="/my-evaluation",
    )

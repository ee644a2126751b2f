# ===========================================================
# notifications/services.py
# ===========================================================
import logging

from django.db import DatabaseError, transaction

from .models import Notification

logger = logging.getLogger(__name__)


def notify(recipient, message, category=Notification.CATEGORY_SYSTEM, link="", auto_delete=False):
    """
    Create a notification for `recipient`.

    Runs in its own savepoint; a failure is logged and never breaks
    the write that triggered it.
    """
    if recipient is None:
        return None
    try:
        with transaction.atomic():
            notification = Notification.objects.create(
                recipient=recipient,
                message=message,
                category=category,
                link=link,
                auto_delete=auto_delete,
            )
    except DatabaseError as exc:
        logger.warning(f"Notification failed for {recipient.email}: {exc}")
        return None

    logger.info(f"Notification created for {recipient.email} ({category})")
    return notification


def notify_many(recipients, message, category=Notification.CATEGORY_SYSTEM, link=""):
    return [notify(user, message, category=category, link=link) for user in recipients]

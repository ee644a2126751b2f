# ===========================================================
# staffeval_backend/utils.py
# ===========================================================
import logging

from rest_framework.exceptions import ValidationError
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _first_message(messages):
    if isinstance(messages, (list, tuple)):
        return _first_message(messages[0]) if messages else ""
    if isinstance(messages, dict):
        return {key: _first_message(value) for key, value in messages.items()}
    return str(messages)


def custom_exception_handler(exc, context):
    """
    Returns all errors at once, formatted as key: message
    so the frontend can show them next to the matching field.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}")
        return None

    if isinstance(response.data, dict):
        response.data = {"errors": {field: _first_message(messages) for field, messages in response.data.items()}}
    elif isinstance(response.data, list):
        response.data = {"errors": {"non_field_errors": _first_message(response.data)}}

    return response


def to_int(value, field, minimum=None, maximum=None, default=None):
    """Parse an integer query/body parameter or raise a field error."""
    if value in (None, ""):
        if default is not None:
            return default
        raise ValidationError({field: "This field is required."})
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError({field: "A valid integer is required."})
    if minimum is not None and number < minimum:
        raise ValidationError({field: f"Ensure this value is greater than or equal to {minimum}."})
    if maximum is not None and number > maximum:
        raise ValidationError({field: f"Ensure this value is less than or equal to {maximum}."})
    return number

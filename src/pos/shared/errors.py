"""Helpers for turning domain errors into user-facing messages."""

from protean.exceptions import ValidationError


def first_error(exc: ValidationError) -> str:
    """Return the first message of a ``ValidationError``'s field → messages dict."""
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        for field_messages in messages.values():
            if isinstance(field_messages, (list, tuple)) and field_messages:
                return str(field_messages[0])
            if field_messages:
                return str(field_messages)
    return str(exc)

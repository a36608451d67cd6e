from flask import current_app

from models.booking import BookingStatus
from utils.errors import InvalidTransition, ValidationFailed

TERMINAL_STATUSES = {BookingStatus.CANCELLED, BookingStatus.COMPLETED}


def parse_status(value) -> BookingStatus:
    try:
        return BookingStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in BookingStatus)
        raise ValidationFailed(
            "Invalid status. Must be one of: " + allowed,
            details={"status": f"must be one of: {allowed}"},
        )


def validate_transition(current, target: BookingStatus) -> BookingStatus:
    """
    Scheduled is only ever set when the booking is created. Cancelled and
    Completed are final unless ALLOW_TERMINAL_STATUS_CHANGES is on.
    """
    current = BookingStatus(current)

    if target is BookingStatus.SCHEDULED:
        raise InvalidTransition(f"Cannot change booking from {current.value} to {target.value}")

    allow_terminal = current_app.config.get("ALLOW_TERMINAL_STATUS_CHANGES", False)
    if current in TERMINAL_STATUSES and not allow_terminal:
        raise InvalidTransition(f"Cannot change booking from {current.value} to {target.value}")

    return target

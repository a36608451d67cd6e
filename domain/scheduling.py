from datetime import date, datetime, time

from flask import current_app

from models.booking import TimeSlot
from utils.errors import ValidationFailed

_DEFAULT_ANCHORS = {
    TimeSlot.MORNING: "08:00",
    TimeSlot.AFTERNOON: "13:00",
}


def parse_time_slot(value, field: str = "time") -> TimeSlot:
    try:
        # exact tokens only; "Morning" or " morning" are rejected
        return TimeSlot(value)
    except ValueError:
        raise ValidationFailed(
            "Invalid time slot",
            details={field: "must be one of: morning, afternoon"},
        )


def slot_anchor(slot: TimeSlot) -> time:
    """Wall-clock time stored for a coarse time slot (morning 08:00, afternoon 13:00)."""
    key = "MORNING_ANCHOR" if slot is TimeSlot.MORNING else "AFTERNOON_ANCHOR"
    raw = current_app.config.get(key) or _DEFAULT_ANCHORS[slot]
    return datetime.strptime(raw, "%H:%M").time()


def parse_booking_date(value, field: str = "date", allow_past: bool = False) -> date:
    # Expect ISO format like "2025-06-01"
    try:
        day = date.fromisoformat((value or "").strip())
    except (ValueError, AttributeError, TypeError):
        raise ValidationFailed("Invalid date", details={field: "use YYYY-MM-DD"})

    if not allow_past and day < date.today():
        raise ValidationFailed("Invalid date", details={field: "date cannot be in the past"})
    return day

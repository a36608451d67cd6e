from datetime import datetime

from flask import Blueprint, request, g

from domain.booking_status import parse_status, validate_transition
from domain.scheduling import parse_booking_date, parse_time_slot, slot_anchor
from models import db
from models.booking import Booking, BookingStatus
from utils.audit import log_event
from utils.auth_context import login_required
from utils.errors import InvalidTransition, NotFoundOrUnauthorized, ValidationFailed
from utils.profiles import sync_profile
from utils.responses import ok

bookings_bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


def _get_owned_booking(booking_id: str) -> Booking:
    booking = Booking.query.filter_by(id=booking_id, clerk_user_id=g.user_id).first()
    if not booking:
        raise NotFoundOrUnauthorized("Booking")
    return booking


def _apply_status(booking_id: str, target: BookingStatus, extra=None) -> Booking:
    booking = _get_owned_booking(booking_id)
    previous = booking.status
    validate_transition(previous, target)

    values = {"status": target.value, "updated_at": datetime.utcnow()}
    values.update(extra or {})

    # scoped by owner and by the status we validated against
    updated = (
        Booking.query
        .filter_by(id=booking_id, clerk_user_id=g.user_id, status=previous)
        .update(values, synchronize_session=False)
    )
    if updated == 0:
        db.session.rollback()
        raise InvalidTransition("Booking was changed by another request, reload and try again")
    db.session.commit()
    db.session.refresh(booking)

    log_event(
        "BOOKING_STATUS_CHANGE",
        user_id=g.user_id,
        entity="booking",
        entity_id=booking_id,
        metadata={"from": previous, "to": target.value},
    )
    return booking


# ---------- list my bookings ----------
@bookings_bp.get("")
@login_required
def list_bookings():
    sync_profile(g.user_id)

    q = Booking.query.filter_by(clerk_user_id=g.user_id)
    status = request.args.get("status")
    if status:
        q = q.filter_by(status=parse_status(status).value)

    rows = q.order_by(Booking.booking_date.desc(), Booking.booking_time.desc()).all()
    return ok([b.to_dict() for b in rows])


@bookings_bp.get("/<booking_id>")
@login_required
def get_booking(booking_id: str):
    return ok(_get_owned_booking(booking_id).to_dict())


# ---------- success page: has the webhook landed yet? ----------
@bookings_bp.get("/session/<session_id>")
@login_required
def get_booking_by_session(session_id: str):
    booking = Booking.query.filter_by(stripe_checkout_session_id=session_id, clerk_user_id=g.user_id).first()
    if not booking:
        # payment confirmation is asynchronous; the client polls until it appears
        return ok(None, status=202, pending=True)
    return ok(booking.to_dict(), pending=False)


# ---------- status changes ----------
@bookings_bp.patch("/<booking_id>")
@login_required
def update_booking_status(booking_id: str):
    data = request.get_json(silent=True) or {}
    if not data.get("status"):
        raise ValidationFailed("Missing required field: status", details={"status": "is required"})

    target = parse_status(data["status"])
    if target is BookingStatus.RESCHEDULED:
        return reschedule_booking(booking_id)

    booking = _apply_status(booking_id, target)
    return ok(booking.to_dict(), message="Booking status updated successfully")


@bookings_bp.post("/<booking_id>/cancel")
@login_required
def cancel_booking(booking_id: str):
    booking = _apply_status(booking_id, BookingStatus.CANCELLED)
    return ok(booking.to_dict(), message="Booking cancelled")


@bookings_bp.post("/<booking_id>/reschedule")
@login_required
def reschedule_booking(booking_id: str):
    data = request.get_json(silent=True) or {}
    details = {f: "is required" for f in ("date", "time") if not data.get(f)}
    if details:
        raise ValidationFailed("Missing required fields: date and time", details=details)

    new_date = parse_booking_date(data["date"])
    new_slot = parse_time_slot(data["time"])

    booking = _apply_status(
        booking_id,
        BookingStatus.RESCHEDULED,
        extra={"booking_date": new_date, "booking_time": slot_anchor(new_slot)},
    )
    return ok(booking.to_dict(), message="Booking rescheduled")

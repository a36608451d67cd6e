"""
Turns verified payment-provider webhook events into booking rows.

The checkout session id is the idempotency key: the bookings table has a
unique constraint on it, and a second insert for the same session (a
redelivery, or two deliveries racing) is treated as success.

HTTP status matters here because it drives the provider's retries:
  * 200 once an event is processed, was already processed, or is of a type we ignore
  * 4xx for bad signatures and incomplete metadata (provider retries, operator alarm)
  * 5xx when the database write failed (provider retries)
"""
import json
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

import stripe
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from config import require_setting
from domain.scheduling import parse_booking_date, parse_time_slot, slot_anchor
from models import db
from models.address import Address
from models.booking import Booking, BookingStatus, TimeSlot
from models.service import Service
from utils.errors import StorageError, ValidationFailed

logger = logging.getLogger(__name__)

SESSION_COMPLETED = "checkout.session.completed"
ASYNC_PAYMENT_SUCCEEDED = "checkout.session.async_payment_succeeded"

REQUIRED_METADATA = ("userId", "serviceId", "addressId", "date", "time", "price")


@dataclass
class CheckoutMetadata:
    user_id: str
    service_id: str
    address_id: str
    booking_date: date
    time_slot: TimeSlot
    price: Decimal
    assessment: Optional[dict] = None


@dataclass
class WebhookOutcome:
    action: str  # created, duplicate, ignored, deferred
    event_type: str
    booking: Optional[Booking] = None


def verify_event(payload: bytes, sig_header: str):
    secret = require_setting("STRIPE_WEBHOOK_SECRET")
    if not sig_header:
        raise ValidationFailed("Missing webhook signature")

    try:
        return stripe.Webhook.construct_event(payload, sig_header, secret)
    except ValueError:
        raise ValidationFailed("Invalid webhook payload")
    except stripe.SignatureVerificationError:
        raise ValidationFailed("Invalid webhook signature")


def stripe_field(obj, key):
    """Optional key lookup on a provider object; those support [] and `in` but no dict methods."""
    if obj is None or key not in obj:
        return None
    return obj[key]


def parse_checkout_metadata(metadata) -> CheckoutMetadata:
    meta = {key: stripe_field(metadata, key) for key in (*REQUIRED_METADATA, "assessment")}

    missing = [key for key in REQUIRED_METADATA if not meta.get(key)]
    if missing:
        raise ValidationFailed(
            "Missing required metadata in checkout session",
            details={key: "is required" for key in missing},
        )

    try:
        price = Decimal(str(meta["price"]))
    except InvalidOperation:
        raise ValidationFailed("Invalid price in checkout metadata", details={"price": "must be numeric"})
    if not price.is_finite() or price <= 0:
        raise ValidationFailed("Invalid price in checkout metadata", details={"price": "must be positive"})

    assessment = None
    if meta.get("assessment"):
        try:
            assessment = json.loads(meta["assessment"])
        except ValueError:
            raise ValidationFailed("Invalid assessment in checkout metadata", details={"assessment": "must be JSON"})
        if not isinstance(assessment, dict):
            raise ValidationFailed("Invalid assessment in checkout metadata", details={"assessment": "must be an object"})

    return CheckoutMetadata(
        user_id=meta["userId"],
        service_id=meta["serviceId"],
        address_id=meta["addressId"],
        # payment can land after the booked day has passed
        booking_date=parse_booking_date(meta["date"], allow_past=True),
        time_slot=parse_time_slot(meta["time"]),
        price=price.quantize(Decimal("0.01")),
        assessment=assessment,
    )


def reconcile_checkout_session(session_id: str, meta: CheckoutMetadata):
    """
    Creates the booking for a paid checkout session, at most once.
    Returns (booking, created).
    """
    existing = Booking.query.filter_by(stripe_checkout_session_id=session_id).first()
    if existing:
        return existing, False

    if db.session.get(Service, meta.service_id) is None:
        raise ValidationFailed("Unknown service in checkout metadata", details={"serviceId": meta.service_id})

    address = Address.query.filter_by(id=meta.address_id, clerk_user_id=meta.user_id).first()
    if address is None:
        # the customer has paid; keep the booking even if the address went away
        logger.warning("Address %s for session %s no longer exists", meta.address_id, session_id)

    booking = Booking(
        clerk_user_id=meta.user_id,
        service_id=meta.service_id,
        address_id=address.id if address else None,
        booking_date=meta.booking_date,
        booking_time=slot_anchor(meta.time_slot),
        status=BookingStatus.SCHEDULED.value,
        price_at_booking=meta.price,
        stripe_checkout_session_id=session_id,
        assessment_data=meta.assessment,
    )
    db.session.add(booking)

    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        # Unique constraint uq_bookings_stripe_session triggers here on a concurrent delivery
        existing = Booking.query.filter_by(stripe_checkout_session_id=session_id).first()
        if existing:
            return existing, False
        raise StorageError(log_detail=f"booking insert failed for {session_id}: {exc.orig}")
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(log_detail=f"booking insert failed for {session_id}: {exc}")

    return booking, True


def handle_event(event) -> WebhookOutcome:
    event_type = stripe_field(event, "type")
    if event_type not in (SESSION_COMPLETED, ASYNC_PAYMENT_SUCCEEDED):
        logger.info("Unhandled event type %s", event_type)
        return WebhookOutcome("ignored", event_type)

    session = event["data"]["object"]
    session_id = stripe_field(session, "id")
    if not session_id:
        raise ValidationFailed("Checkout session has no id")

    if event_type == SESSION_COMPLETED and stripe_field(session, "payment_status") == "unpaid":
        # delayed payment methods: the booking is created on async_payment_succeeded
        logger.info("Checkout session %s completed but not yet paid", session_id)
        return WebhookOutcome("deferred", event_type)

    meta = parse_checkout_metadata(stripe_field(session, "metadata"))
    booking, created = reconcile_checkout_session(session_id, meta)
    return WebhookOutcome("created" if created else "duplicate", event_type, booking)

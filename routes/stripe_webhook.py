import logging

from flask import Blueprint, request, jsonify

from domain.reconciliation import handle_event, stripe_field, verify_event
from utils.audit import log_event
from utils.errors import ValidationFailed

logger = logging.getLogger(__name__)

webhook_bp = Blueprint("webhook", __name__, url_prefix="/api/stripe")


@webhook_bp.post("/webhook")
def stripe_webhook():
    sig_header = request.headers.get("Stripe-Signature")
    payload = request.get_data()

    # nothing is written before the signature checks out
    event = verify_event(payload, sig_header)
    event_id = stripe_field(event, "id")

    try:
        outcome = handle_event(event)
    except ValidationFailed as exc:
        # non-2xx makes the provider retry and shows up in its dashboard
        logger.error("Rejected %s event %s: %s %s", stripe_field(event, "type"), event_id, exc.message, exc.details)
        raise

    booking = outcome.booking
    if outcome.action == "created":
        log_event("BOOKING_CREATE", user_id=booking.clerk_user_id, entity="booking", entity_id=booking.id,
                  metadata={"stripe_session_id": booking.stripe_checkout_session_id, "event_id": event_id})
    elif outcome.action == "duplicate":
        log_event("BOOKING_DUPLICATE_EVENT", user_id=booking.clerk_user_id, entity="booking", entity_id=booking.id,
                  metadata={"stripe_session_id": booking.stripe_checkout_session_id, "event_id": event_id})

    return jsonify(received=True), 200

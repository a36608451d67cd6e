"""
Hosted checkout session creation.

Nothing is written to the database here. The booking row only appears once
the payment provider reports the session as paid (see domain/reconciliation.py),
so abandoned checkouts leave nothing behind.
"""
import json
import logging
import math
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

import stripe
from flask import current_app

from config import require_setting
from domain.scheduling import parse_booking_date, parse_time_slot
from models.booking import TimeSlot
from utils.errors import UpstreamProviderError, ValidationFailed

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("serviceId", "addressId", "date", "time")


@dataclass
class CheckoutDraft:
    service_id: str
    address_id: str
    date: date
    time_slot: TimeSlot
    price_cents: int
    assessment: Optional[dict] = None


def init_stripe(app):
    """Configure the provider client once per process."""
    stripe.api_key = app.config.get("STRIPE_SECRET_KEY")
    stripe.max_network_retries = 2


def format_amount(cents: int) -> str:
    return f"{Decimal(cents) / 100:.2f}"


def _parse_price(value, details: dict):
    if value is None:
        details["price"] = "is required"
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        details["price"] = "must be a number of cents"
        return None
    if not math.isfinite(value) or value != int(value):
        details["price"] = "must be a whole number of cents"
        return None
    return int(value)


def parse_checkout_request(data: dict) -> CheckoutDraft:
    details = {}
    for field in REQUIRED_FIELDS:
        value = data.get(field)
        if value is not None and not isinstance(value, str):
            details[field] = "must be a string"
        elif not (value or "").strip():
            details[field] = "is required"

    price_cents = _parse_price(data.get("price"), details)
    if details:
        raise ValidationFailed("Missing or invalid booking details.", details=details)

    minimum = current_app.config.get("STRIPE_MINIMUM_CHARGE_CENTS", 50)
    if price_cents < minimum:
        raise ValidationFailed(
            f"Amount must be at least {format_amount(minimum)}",
            details={"price": f"minimum chargeable amount is {minimum} cents"},
        )

    assessment = data.get("assessment")
    if assessment is not None and not isinstance(assessment, dict):
        raise ValidationFailed("Invalid assessment data format.", details={"assessment": "must be an object"})

    return CheckoutDraft(
        service_id=data["serviceId"].strip(),
        address_id=data["addressId"].strip(),
        date=parse_booking_date(data["date"]),
        time_slot=parse_time_slot(data["time"]),
        price_cents=price_cents,
        assessment=assessment or None,
    )


def build_session_metadata(user_id: str, draft: CheckoutDraft) -> dict:
    """Flat string-only metadata the webhook reads back."""
    metadata = {
        "userId": user_id,
        "serviceId": draft.service_id,
        "addressId": draft.address_id,
        "date": draft.date.isoformat(),
        "time": draft.time_slot.value,
        "price": format_amount(draft.price_cents),
    }
    if draft.assessment:
        encoded = json.dumps(draft.assessment, separators=(",", ":"), sort_keys=True)
        limit = current_app.config.get("STRIPE_METADATA_VALUE_MAX", 500)
        if len(encoded) > limit:
            raise ValidationFailed(
                "Assessment details are too long.",
                details={"assessment": f"must serialize to at most {limit} characters"},
            )
        metadata["assessment"] = encoded
    return metadata


def create_checkout_session(user_id: str, draft: CheckoutDraft, service_name: str, customer_email=None):
    require_setting("STRIPE_SECRET_KEY")
    base_url = require_setting("APP_BASE_URL").rstrip("/")

    metadata = build_session_metadata(user_id, draft)
    params = dict(
        mode="payment",
        payment_method_types=["card"],
        line_items=[{
            "price_data": {
                "currency": current_app.config.get("CHECKOUT_CURRENCY", "usd"),
                "product_data": {
                    "name": service_name or "Lawn Care Service Booking",
                    "description": f"Service scheduled for {metadata['date']} ({metadata['time']})",
                },
                "unit_amount": draft.price_cents,
            },
            "quantity": 1,
        }],
        success_url=f"{base_url}/booking/success?session_id={{CHECKOUT_SESSION_ID}}",
        cancel_url=f"{base_url}/booking",
        client_reference_id=user_id,
        metadata=metadata,
    )
    if customer_email:
        params["customer_email"] = customer_email

    try:
        session = stripe.checkout.Session.create(**params)
    except stripe.CardError as exc:
        logger.warning("Checkout rejected card for user %s: %s", user_id, exc.code)
        raise UpstreamProviderError("Your card was declined.", status_code=402)
    except stripe.RateLimitError:
        logger.warning("Payment provider rate limited checkout for user %s", user_id)
        raise UpstreamProviderError("Too many payment requests, please try again shortly.", status_code=429)
    except (stripe.AuthenticationError, stripe.PermissionError) as exc:
        # bad or restricted key; operator problem, not the customer's
        logger.error("Payment provider refused our credentials: %s", type(exc).__name__)
        raise UpstreamProviderError("Payment provider is unavailable. Please try again later.")
    except stripe.APIConnectionError:
        logger.exception("Payment provider unreachable")
        raise UpstreamProviderError("Payment provider unreachable. Please try again later.", status_code=503)
    except stripe.StripeError as exc:
        logger.error("Error creating checkout session: %s", getattr(exc, "user_message", None) or exc)
        raise UpstreamProviderError()

    logger.info("Checkout session created for user %s: %s", user_id, session["id"])
    return session

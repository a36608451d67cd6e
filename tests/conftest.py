import hashlib
import hmac
import json
import time
from datetime import date, time as dtime, timedelta
from decimal import Decimal

import pytest
import stripe
from jose import jwt

from app import create_app
from models import db
from models.address import Address
from models.booking import Booking
from models.service import Service

IDENTITY_SECRET = "test-identity-secret"
WEBHOOK_SECRET = "whsec_test_secret"

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "STRIPE_SECRET_KEY": "sk_test_dummy",
    "STRIPE_WEBHOOK_SECRET": WEBHOOK_SECRET,
    "IDENTITY_PROVIDER_SECRET": IDENTITY_SECRET,
    "IDENTITY_TOKEN_ALGORITHMS": ["HS256"],
    "IDENTITY_TOKEN_ISSUER": None,
    "IDENTITY_TOKEN_AUDIENCE": None,
    "APP_BASE_URL": "http://localhost:3000",
    "ALLOW_TERMINAL_STATUS_CHANGES": False,
}


def future_day(days: int = 30) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


def make_token(user_id: str, **claims) -> str:
    payload = {"sub": user_id, "exp": int(time.time()) + 3600}
    payload.update(claims)
    return jwt.encode(payload, IDENTITY_SECRET, algorithm="HS256")


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp=None) -> str:
    # Same scheme the provider uses: HMAC-SHA256 over "<timestamp>.<body>"
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.{payload}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def checkout_event(session_id: str, metadata: dict, event_type="checkout.session.completed",
                   payment_status="paid", event_id="evt_test_1") -> str:
    return json.dumps({
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {
            "object": {
                "id": session_id,
                "object": "checkout.session",
                "payment_status": payment_status,
                "amount_total": 2500,
                "metadata": metadata,
            }
        },
    })


def booking_metadata(**overrides) -> dict:
    meta = {
        "userId": "u_1",
        "serviceId": "svc_1",
        "addressId": "addr_1",
        "date": future_day(),
        "time": "morning",
        "price": "25.00",
    }
    meta.update(overrides)
    return meta


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth():
    def _headers(user_id="u_1", **claims):
        return {"Authorization": f"Bearer {make_token(user_id, **claims)}"}
    return _headers


@pytest.fixture
def seeded(app):
    """svc_1 (25.00), a custom service, addr_1 owned by u_1, addr_2 owned by u_2."""
    with app.app_context():
        db.session.add_all([
            Service(id="svc_1", name="Basic Lawn Care", price=Decimal("25.00"),
                    features=["Lawn mowing"], display_order=1),
            Service(id="svc_custom", name="Custom Service", price=None,
                    features=["Personalized assessment"], is_custom=True, display_order=4),
            Address(id="addr_1", clerk_user_id="u_1", street_address="1 Main St",
                    area="Kitty", city="Georgetown", region="Demerara-Mahaica"),
            Address(id="addr_2", clerk_user_id="u_2", street_address="9 Sea Wall Rd",
                    area="Bel Air", city="Georgetown", region="Demerara-Mahaica"),
        ])
        db.session.commit()
    return {"service_id": "svc_1", "address_id": "addr_1", "other_address_id": "addr_2"}


@pytest.fixture
def make_booking(app, seeded):
    def _make(user_id="u_1", session_id="cs_test_existing", status="Scheduled", address_id="addr_1"):
        with app.app_context():
            booking = Booking(
                clerk_user_id=user_id,
                service_id="svc_1",
                address_id=address_id,
                booking_date=date.today() + timedelta(days=10),
                booking_time=dtime(8, 0),
                status=status,
                price_at_booking=Decimal("25.00"),
                stripe_checkout_session_id=session_id,
            )
            db.session.add(booking)
            db.session.commit()
            return booking.id
    return _make


@pytest.fixture
def fake_checkout(monkeypatch):
    """Replaces the provider call; records the params it was given."""
    calls = []

    def _create(**params):
        calls.append(params)
        session_id = f"cs_test_{len(calls)}"
        # same object type the client library returns
        return stripe.checkout.Session.construct_from(
            {"id": session_id, "object": "checkout.session",
             "url": f"https://checkout.stripe.com/c/pay/{session_id}"},
            TEST_CONFIG["STRIPE_SECRET_KEY"],
        )

    monkeypatch.setattr(stripe.checkout.Session, "create", _create)
    return calls


def post_event(client, body: str, signature=None):
    headers = {"Content-Type": "application/json"}
    if signature is not False:
        headers["Stripe-Signature"] = signature or sign_payload(body)
    return client.post("/api/stripe/webhook", data=body, headers=headers)

import json
from datetime import date, timedelta

import pytest
import stripe

from conftest import future_day
from models.booking import Booking


def _draft(**overrides):
    body = {
        "serviceId": "svc_1",
        "addressId": "addr_1",
        "date": future_day(),
        "time": "morning",
        "price": 2500,
    }
    body.update(overrides)
    return body


def _checkout(client, headers, body):
    return client.post("/api/stripe/create-checkout", json=body, headers=headers)


def test_requires_authentication(client, seeded, fake_checkout):
    resp = _checkout(client, {}, _draft())

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Authentication required"
    assert fake_checkout == []


def test_invalid_token_is_treated_as_anonymous(client, seeded, fake_checkout):
    resp = _checkout(client, {"Authorization": "Bearer not-a-token"}, _draft())
    assert resp.status_code == 401


def test_creates_session_with_string_metadata(app, client, auth, seeded, fake_checkout):
    resp = _checkout(client, auth("u_1", email="owner@example.com"), _draft())

    assert resp.status_code == 200
    assert resp.get_json()["sessionId"] == "cs_test_1"
    assert resp.get_json()["url"] == "https://checkout.stripe.com/c/pay/cs_test_1"

    params = fake_checkout[0]
    assert params["mode"] == "payment"
    assert params["line_items"][0]["price_data"]["unit_amount"] == 2500
    assert params["customer_email"] == "owner@example.com"
    assert "{CHECKOUT_SESSION_ID}" in params["success_url"]
    assert params["metadata"] == {
        "userId": "u_1",
        "serviceId": "svc_1",
        "addressId": "addr_1",
        "date": future_day(),
        "time": "morning",
        "price": "25.00",
    }
    assert all(isinstance(v, str) for v in params["metadata"].values())

    # booking only appears once the webhook confirms payment
    with app.app_context():
        assert Booking.query.count() == 0


def test_assessment_travels_as_json_text(client, auth, seeded, fake_checkout):
    assessment = {"lawnSize": "medium", "lawnCondition": "good", "hasObstacles": False}
    resp = _checkout(client, auth(), _draft(serviceId="svc_custom", assessment=assessment))

    assert resp.status_code == 200
    assert json.loads(fake_checkout[0]["metadata"]["assessment"]) == assessment


def test_oversized_assessment_is_rejected(client, auth, seeded, fake_checkout):
    resp = _checkout(client, auth(), _draft(assessment={"notes": "x" * 600}))

    assert resp.status_code == 400
    assert "assessment" in resp.get_json()["details"]
    assert fake_checkout == []


@pytest.mark.parametrize("field", ["serviceId", "addressId", "date", "time"])
def test_missing_fields_are_rejected(client, auth, seeded, fake_checkout, field):
    body = _draft()
    del body[field]
    resp = _checkout(client, auth(), body)

    assert resp.status_code == 400
    assert field in resp.get_json()["details"]
    assert fake_checkout == []


@pytest.mark.parametrize("price", [49, 0, -100])
def test_price_below_minimum_is_rejected_before_provider_call(client, auth, seeded, fake_checkout, price):
    resp = _checkout(client, auth(), _draft(price=price))

    assert resp.status_code == 400
    assert "price" in resp.get_json()["details"]
    assert fake_checkout == []


@pytest.mark.parametrize("price", ["2500", 25.5, True, None])
def test_price_must_be_whole_cents(client, auth, seeded, fake_checkout, price):
    resp = _checkout(client, auth(), _draft(price=price))

    assert resp.status_code == 400
    assert fake_checkout == []


def test_minimum_price_is_accepted(client, auth, seeded, fake_checkout):
    resp = _checkout(client, auth(), _draft(price=50))
    assert resp.status_code == 200
    assert fake_checkout[0]["metadata"]["price"] == "0.50"


def test_invalid_time_slot_is_rejected(client, auth, seeded, fake_checkout):
    resp = _checkout(client, auth(), _draft(time="evening"))

    assert resp.status_code == 400
    assert fake_checkout == []


@pytest.mark.parametrize("field", ["serviceId", "addressId"])
def test_blank_ids_are_reported_as_missing(client, auth, seeded, fake_checkout, field):
    resp = _checkout(client, auth(), _draft(**{field: "   "}))

    assert resp.status_code == 400
    assert resp.get_json()["details"][field] == "is required"
    assert fake_checkout == []


@pytest.mark.parametrize("slot", ["Morning", "AFTERNOON", " morning"])
def test_time_slot_tokens_are_exact(client, auth, seeded, fake_checkout, slot):
    resp = _checkout(client, auth(), _draft(time=slot))

    assert resp.status_code == 400
    assert "time" in resp.get_json()["details"]
    assert fake_checkout == []


def test_past_date_is_rejected(client, auth, seeded, fake_checkout):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    resp = _checkout(client, auth(), _draft(date=yesterday))

    assert resp.status_code == 400
    assert "date" in resp.get_json()["details"]


def test_someone_elses_address_is_not_found(client, auth, seeded, fake_checkout):
    resp = _checkout(client, auth("u_1"), _draft(addressId="addr_2"))

    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Address not found or unauthorized"
    assert fake_checkout == []


def test_unknown_service_is_not_found(client, auth, seeded, fake_checkout):
    resp = _checkout(client, auth(), _draft(serviceId="svc_nope"))
    assert resp.status_code == 404


@pytest.mark.parametrize("error, status", [
    (stripe.CardError("Your card was declined.", None, "card_declined"), 402),
    (stripe.RateLimitError("Too many requests"), 429),
    (stripe.AuthenticationError("Invalid API Key provided: sk_test_dummy"), 502),
    (stripe.APIConnectionError("Network error"), 503),
    (stripe.InvalidRequestError("No such price", "line_items"), 502),
])
def test_provider_errors_are_mapped_without_leaking_credentials(
    client, auth, seeded, monkeypatch, error, status
):
    def _raise(**params):
        raise error

    monkeypatch.setattr(stripe.checkout.Session, "create", _raise)
    resp = _checkout(client, auth(), _draft())

    assert resp.status_code == status
    body = resp.get_data(as_text=True)
    assert "sk_test_dummy" not in body
    assert resp.get_json()["success"] is False


def test_missing_secret_key_is_server_misconfiguration(app, client, auth, seeded, fake_checkout):
    app.config["STRIPE_SECRET_KEY"] = None
    resp = _checkout(client, auth(), _draft())

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Server misconfigured"
    assert fake_checkout == []

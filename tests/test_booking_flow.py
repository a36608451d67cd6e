from conftest import checkout_event, future_day, post_event
from models.booking import Booking


def test_checkout_then_webhook_then_redelivery(app, client, auth, seeded, fake_checkout):
    day = future_day(14)
    headers = auth("u_1")

    resp = client.post("/api/stripe/create-checkout", headers=headers, json={
        "serviceId": "svc_1",
        "addressId": "addr_1",
        "date": day,
        "time": "morning",
        "price": 2500,
    })
    assert resp.status_code == 200
    session_id = resp.get_json()["sessionId"]

    # nothing is booked until the payment is confirmed
    with app.app_context():
        assert Booking.query.count() == 0
    pending = client.get(f"/api/bookings/session/{session_id}", headers=headers)
    assert pending.status_code == 202
    assert pending.get_json()["pending"] is True

    # the provider echoes back the metadata it was given at checkout
    metadata = fake_checkout[0]["metadata"]
    body = checkout_event(session_id, metadata)
    assert post_event(client, body).status_code == 200

    listing = client.get("/api/bookings", headers=headers).get_json()["data"]
    assert len(listing) == 1
    booking = listing[0]
    assert booking["status"] == "Scheduled"
    assert booking["bookingDate"] == day
    assert booking["bookingTime"] == "08:00"
    assert booking["priceAtBooking"] == "25.00"

    assert post_event(client, body).status_code == 200
    with app.app_context():
        assert Booking.query.filter_by(stripe_checkout_session_id=session_id).count() == 1

    found = client.get(f"/api/bookings/session/{session_id}", headers=headers)
    assert found.status_code == 200
    assert found.get_json()["data"]["id"] == booking["id"]

    # another user cannot see it
    assert client.get("/api/bookings", headers=auth("u_2")).get_json()["data"] == []

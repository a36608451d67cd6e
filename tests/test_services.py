from datetime import datetime, timedelta
from decimal import Decimal

from models import db
from models.service import Service
from utils.seed import DEFAULT_SERVICES, cleanup_duplicate_services, seed_services


def test_catalogue_is_public_and_ordered(client, seeded):
    resp = client.get("/api/services")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert [s["id"] for s in data] == ["svc_1", "svc_custom"]
    assert data[0]["price"] == 25.0
    assert data[1]["price"] is None
    assert data[1]["isCustom"] is True


def test_seed_is_idempotent(app):
    with app.app_context():
        assert len(seed_services()) == len(DEFAULT_SERVICES)
        assert seed_services() == []
        assert Service.query.count() == len(DEFAULT_SERVICES)


def test_cleanup_keeps_oldest_duplicate(app):
    now = datetime.utcnow()
    with app.app_context():
        db.session.add_all([
            Service(id="old", name="Basic Lawn Care", price=Decimal("25.00"), created_at=now - timedelta(days=2)),
            Service(id="new", name="Basic Lawn Care", price=Decimal("25.00"), created_at=now),
            Service(id="other", name="Premium Lawn Care", price=Decimal("45.00"), created_at=now),
        ])
        db.session.commit()

        removed = cleanup_duplicate_services()

        assert [service_id for service_id, _ in removed] == ["new"]
        assert {s.id for s in Service.query.all()} == {"old", "other"}


def test_cli_seed_and_custom_price(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["seed-services"])
    assert result.exit_code == 0
    assert "4 service(s) created" in result.output

    result = runner.invoke(args=["set-custom-service-price", "5"])
    assert result.exit_code == 0
    assert "Updated 1 custom service(s) to $5.00" in result.output

    with app.app_context():
        custom = Service.query.filter_by(is_custom=True).one()
        assert custom.price == Decimal("5.00")

    result = runner.invoke(args=["set-custom-service-price", "abc"])
    assert result.exit_code != 0


def test_cli_recent_bookings(app, make_booking):
    make_booking(session_id="cs_test_cli")
    result = app.test_cli_runner().invoke(args=["recent-bookings", "--limit", "5"])

    assert result.exit_code == 0
    assert "cs_test_cli" in result.output
    assert "Basic Lawn Care" in result.output

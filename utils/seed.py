from decimal import Decimal

from models import db
from models.booking import Booking
from models.custom_assessment import CustomAssessment
from models.service import Service

DEFAULT_SERVICES = [
    {
        "name": "Basic Lawn Care",
        "description": "Essential lawn maintenance including mowing, edging, and basic cleanup.",
        "price": Decimal("25.00"),
        "features": ["Lawn mowing", "Edge trimming", "Basic cleanup"],
        "includes_media": False,
        "is_custom": False,
        "display_order": 1,
    },
    {
        "name": "Premium Lawn Care",
        "description": "Comprehensive lawn care with fertilization and weed control.",
        "price": Decimal("45.00"),
        "features": ["Everything in Basic", "Fertilization", "Weed control", "Leaf removal"],
        "includes_media": True,
        "is_custom": False,
        "display_order": 2,
    },
    {
        "name": "Deluxe Lawn Care",
        "description": "Premium service with landscaping and garden maintenance.",
        "price": Decimal("65.00"),
        "features": ["Everything in Premium", "Landscaping", "Garden maintenance", "Seasonal cleanup"],
        "includes_media": True,
        "is_custom": False,
        "display_order": 3,
    },
    {
        "name": "Custom Service",
        "description": "Tailored lawn care solution based on your specific needs and property assessment.",
        "price": None,  # quoted after assessment
        "features": ["Personalized assessment", "Custom treatment plan", "Specialized equipment", "Expert consultation"],
        "includes_media": True,
        "is_custom": True,
        "display_order": 4,
    },
]

def seed_services() -> list:
    """Insert the default catalogue, skipping names that already exist. Safe to re-run."""
    existing = {s.name for s in Service.query.all()}
    created = []
    for data in DEFAULT_SERVICES:
        if data["name"] in existing:
            continue
        service = Service(**data)
        db.session.add(service)
        created.append(service)
    db.session.commit()
    return created

def cleanup_duplicate_services() -> list:
    """
    Keeps the oldest service of each (name, price, is_custom) group and deletes
    the rest. Bookings and assessments pointing at a duplicate are repointed
    to the kept row first. Returns (id, name) of every deleted row.
    """
    groups = {}
    for service in Service.query.order_by(Service.created_at.asc(), Service.id.asc()).all():
        key = (service.name, service.price, service.is_custom)
        groups.setdefault(key, []).append(service)

    removed = []
    for keep, *duplicates in groups.values():
        for dup in duplicates:
            Booking.query.filter_by(service_id=dup.id).update({"service_id": keep.id}, synchronize_session=False)
            CustomAssessment.query.filter_by(service_id=dup.id).update({"service_id": keep.id}, synchronize_session=False)
            removed.append((dup.id, dup.name))
            db.session.delete(dup)
    db.session.commit()
    return removed

def set_custom_service_price(price: Decimal) -> int:
    updated = Service.query.filter_by(is_custom=True).update({"price": price}, synchronize_session=False)
    db.session.commit()
    return updated

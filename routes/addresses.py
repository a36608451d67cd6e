from datetime import datetime

from flask import Blueprint, current_app, request, g

from models import db
from models.address import Address
from models.booking import Booking
from models.custom_assessment import CustomAssessment
from utils.audit import log_event
from utils.auth_context import login_required
from utils.errors import NotFoundOrUnauthorized, ValidationFailed
from utils.profiles import sync_profile
from utils.responses import ok

addresses_bp = Blueprint("addresses", __name__, url_prefix="/api/addresses")

REQUIRED_FIELDS = ("streetAddress", "area", "city", "region")

# request field -> column
EDITABLE_FIELDS = {
    "streetAddress": "street_address",
    "area": "area",
    "city": "city",
    "region": "region",
    "postalCode": "postal_code",
    "country": "country",
}


def _clean(value):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationFailed("Address fields must be text")
    return value.strip() or None


@addresses_bp.get("")
@login_required
def list_addresses():
    rows = (
        Address.query
        .filter_by(clerk_user_id=g.user_id)
        .order_by(Address.created_at.desc())
        .all()
    )
    return ok([a.to_dict() for a in rows])


@addresses_bp.post("")
@login_required
def create_address():
    sync_profile(g.user_id)

    data = request.get_json(silent=True) or {}
    values = {field: _clean(data.get(field)) for field in EDITABLE_FIELDS}

    missing = {f: "is required" for f in REQUIRED_FIELDS if not values[f]}
    if missing:
        raise ValidationFailed(
            "Missing required fields: " + ", ".join(REQUIRED_FIELDS),
            details=missing,
        )

    address = Address(
        clerk_user_id=g.user_id,
        street_address=values["streetAddress"],
        area=values["area"],
        city=values["city"],
        region=values["region"],
        postal_code=values["postalCode"],
        country=values["country"] or current_app.config.get("DEFAULT_COUNTRY", "Guyana"),
    )
    db.session.add(address)
    db.session.commit()

    log_event("ADDRESS_CREATE", user_id=g.user_id, entity="address", entity_id=address.id)
    return ok(address.to_dict(), status=201, message="Address created successfully")


@addresses_bp.patch("/<address_id>")
@login_required
def update_address(address_id: str):
    data = request.get_json(silent=True) or {}

    changes = {}
    for field, column in EDITABLE_FIELDS.items():
        if field not in data:
            continue
        value = _clean(data[field])
        if field in REQUIRED_FIELDS and not value:
            raise ValidationFailed("Invalid address", details={field: "cannot be empty"})
        changes[column] = value

    if not changes:
        raise ValidationFailed("No address fields to update")

    changes["updated_at"] = datetime.utcnow()
    updated = (
        Address.query
        .filter_by(id=address_id, clerk_user_id=g.user_id)
        .update(changes, synchronize_session=False)
    )
    if updated == 0:
        db.session.rollback()
        raise NotFoundOrUnauthorized("Address")
    db.session.commit()

    log_event("ADDRESS_UPDATE", user_id=g.user_id, entity="address", entity_id=address_id,
              metadata={"fields": sorted(k for k in changes if k != "updated_at")})
    address = db.session.get(Address, address_id)
    return ok(address.to_dict(), message="Address updated successfully")


@addresses_bp.delete("/<address_id>")
@login_required
def delete_address(address_id: str):
    # bookings keep their history without the address; not every backend enforces SET NULL
    for model in (Booking, CustomAssessment):
        model.query.filter_by(address_id=address_id, clerk_user_id=g.user_id).update(
            {"address_id": None}, synchronize_session=False
        )

    deleted = (
        Address.query
        .filter_by(id=address_id, clerk_user_id=g.user_id)
        .delete(synchronize_session=False)
    )
    if deleted == 0:
        db.session.rollback()
        raise NotFoundOrUnauthorized("Address")
    db.session.commit()

    log_event("ADDRESS_DELETE", user_id=g.user_id, entity="address", entity_id=address_id)
    return ok(None, message="Address deleted successfully")

import logging

from flask import Blueprint, request, jsonify, g

from domain.checkout import create_checkout_session, parse_checkout_request
from models import db
from models.address import Address
from models.service import Service
from utils.auth_context import login_required
from utils.errors import NotFoundOrUnauthorized, ValidationFailed

logger = logging.getLogger(__name__)

checkout_bp = Blueprint("checkout", __name__, url_prefix="/api/stripe")


@checkout_bp.post("/create-checkout")
@login_required
def create_checkout():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailed("Invalid request body.")

    draft = parse_checkout_request(data)

    service = db.session.get(Service, draft.service_id)
    if not service:
        raise NotFoundOrUnauthorized("Service")
    address = Address.query.filter_by(id=draft.address_id, clerk_user_id=g.user_id).first()
    if not address:
        raise NotFoundOrUnauthorized("Address")

    customer_email = (g.claims or {}).get("email")
    session = create_checkout_session(g.user_id, draft, service.name, customer_email=customer_email)

    # no database write here: the booking is created by the webhook once paid
    logger.info("CHECKOUT_SESSION_CREATED %s user=%s service=%s amount=%s",
                session["id"], g.user_id, service.id, draft.price_cents)
    return jsonify(sessionId=session["id"], url=session["url"]), 200

from flask import Blueprint, request, g

from domain.scheduling import parse_booking_date, parse_time_slot
from models import db
from models.address import Address
from models.custom_assessment import CustomAssessment
from models.service import Service
from utils.audit import log_event
from utils.auth_context import login_required
from utils.errors import NotFoundOrUnauthorized, ValidationFailed
from utils.responses import ok

assessments_bp = Blueprint("assessments", __name__, url_prefix="/api/assessments")

REQUIRED_FIELDS = ("serviceId", "addressId", "preferredDate", "preferredTime", "assessmentData")


# Custom services are quoted after an on-site assessment instead of paid up front
@assessments_bp.post("")
@login_required
def create_assessment():
    data = request.get_json(silent=True) or {}
    missing = {f: "is required" for f in REQUIRED_FIELDS if not data.get(f)}
    if missing:
        raise ValidationFailed("Missing required fields", details=missing)
    if not isinstance(data["assessmentData"], dict):
        raise ValidationFailed("Invalid assessment data format.", details={"assessmentData": "must be an object"})

    preferred_date = parse_booking_date(data["preferredDate"], field="preferredDate")
    preferred_time = parse_time_slot(data["preferredTime"], field="preferredTime")

    if db.session.get(Service, data["serviceId"]) is None:
        raise NotFoundOrUnauthorized("Service")
    address = Address.query.filter_by(id=data["addressId"], clerk_user_id=g.user_id).first()
    if not address:
        raise NotFoundOrUnauthorized("Address")

    assessment = CustomAssessment(
        clerk_user_id=g.user_id,
        service_id=data["serviceId"],
        address_id=address.id,
        preferred_date=preferred_date,
        preferred_time=preferred_time.value,
        assessment_data=data["assessmentData"],
        status="Pending",
    )
    db.session.add(assessment)
    db.session.commit()

    log_event("ASSESSMENT_CREATE", user_id=g.user_id, entity="custom_assessment", entity_id=assessment.id)
    return ok({"assessmentId": assessment.id}, status=201, message="Assessment request submitted successfully")

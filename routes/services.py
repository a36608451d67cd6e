from flask import Blueprint

from models.service import Service
from utils.responses import ok

services_bp = Blueprint("services", __name__, url_prefix="/api/services")


# Public: the catalogue is shown before sign-in
@services_bp.get("")
def list_services():
    rows = Service.query.order_by(Service.display_order.asc(), Service.name.asc()).all()
    return ok([s.to_dict() for s in rows])

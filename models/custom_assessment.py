import uuid
from datetime import datetime
from models.db import db

class CustomAssessment(db.Model):
    __tablename__ = "custom_assessments"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    clerk_user_id = db.Column(db.String(64), nullable=False, index=True)
    service_id = db.Column(db.String(36), db.ForeignKey("services.id"), nullable=False)
    address_id = db.Column(
        db.String(36), db.ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True
    )

    preferred_date = db.Column(db.Date, nullable=False)
    preferred_time = db.Column(db.String(20), nullable=False)
    assessment_data = db.Column(db.JSON, nullable=False)

    status = db.Column(db.String(20), nullable=False, default="Pending")
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

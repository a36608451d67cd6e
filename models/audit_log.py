from datetime import datetime
from models.db import db

class AuditLog(db.Model):
    """Append-only trail of writes made on behalf of a user or by the payment webhook."""
    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)
    # identity provider user id; NULL for webhook and CLI events
    user_id = db.Column(db.String(64), nullable=True, index=True)
    action = db.Column(db.String(80), nullable=False)  # e.g. BOOKING_CREATE, ADDRESS_DELETE
    entity = db.Column(db.String(40), nullable=True)   # booking, address, custom_assessment
    entity_id = db.Column(db.String(255), nullable=True)  # row id or checkout session id

    ip = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)
    details = db.Column(db.JSON, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.Index("ix_audit_logs_entity", "entity", "entity_id"),
    )

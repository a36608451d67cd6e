import uuid
from datetime import datetime
from models.db import db

class Address(db.Model):
    __tablename__ = "addresses"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    clerk_user_id = db.Column(db.String(64), nullable=False, index=True)

    street_address = db.Column(db.String(255), nullable=False)
    area = db.Column(db.String(120), nullable=False)
    city = db.Column(db.String(120), nullable=False)
    region = db.Column(db.String(120), nullable=False)
    postal_code = db.Column(db.String(20), nullable=True)
    country = db.Column(db.String(80), nullable=False, default="Guyana")

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "streetAddress": self.street_address,
            "area": self.area,
            "city": self.city,
            "region": self.region,
            "postalCode": self.postal_code,
            "country": self.country,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

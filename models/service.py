import uuid
from datetime import datetime
from models.db import db

class Service(db.Model):
    __tablename__ = "services"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=True)

    # NULL price means "quote after assessment"
    price = db.Column(db.Numeric(10, 2), nullable=True)
    features = db.Column(db.JSON, nullable=False, default=list)
    includes_media = db.Column(db.Boolean, default=False, nullable=False)
    is_custom = db.Column(db.Boolean, default=False, nullable=False)
    display_order = db.Column(db.Integer, default=0, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": float(self.price) if self.price is not None else None,
            "features": list(self.features or []),
            "includesMedia": self.includes_media,
            "isCustom": self.is_custom,
            "displayOrder": self.display_order,
        }

from datetime import datetime
from models.db import db

class Profile(db.Model):
    """Local mirror of a user known to the hosted identity provider."""
    __tablename__ = "profiles"

    id = db.Column(db.Integer, primary_key=True)
    clerk_user_id = db.Column(db.String(64), unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

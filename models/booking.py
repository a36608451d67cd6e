import enum
import uuid
from datetime import datetime
from models.db import db


class BookingStatus(str, enum.Enum):
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    RESCHEDULED = "Rescheduled"


class TimeSlot(str, enum.Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    clerk_user_id = db.Column(db.String(64), nullable=False, index=True)
    service_id = db.Column(db.String(36), db.ForeignKey("services.id"), nullable=False, index=True)
    # bookings outlive the address they were made for
    address_id = db.Column(
        db.String(36), db.ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True, index=True
    )

    booking_date = db.Column(db.Date, nullable=False)
    booking_time = db.Column(db.Time, nullable=False)  # slot anchor, e.g. 08:00 for morning

    status = db.Column(db.String(20), nullable=False, default=BookingStatus.SCHEDULED.value)
    # status values: Scheduled, Completed, Cancelled, Rescheduled

    price_at_booking = db.Column(db.Numeric(10, 2), nullable=False)
    stripe_checkout_session_id = db.Column(db.String(255), nullable=False)
    assessment_data = db.Column(db.JSON, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    service = db.relationship("Service", lazy="joined")

    __table_args__ = (
        # Idempotency key: at most one booking per checkout session
        db.UniqueConstraint("stripe_checkout_session_id", name="uq_bookings_stripe_session"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "serviceId": self.service_id,
            "serviceName": self.service.name if self.service else None,
            "addressId": self.address_id,
            "bookingDate": self.booking_date.isoformat(),
            "bookingTime": self.booking_time.strftime("%H:%M"),
            "status": self.status,
            "priceAtBooking": f"{self.price_at_booking:.2f}",
            "stripeCheckoutSessionId": self.stripe_checkout_session_id,
            "assessment": self.assessment_data,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

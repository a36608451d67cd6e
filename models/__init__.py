from .db import db
from .audit_log import AuditLog
from .profile import Profile
from .service import Service
from .address import Address
from .booking import Booking, BookingStatus, TimeSlot
from .custom_assessment import CustomAssessment

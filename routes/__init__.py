from .health import health_bp
from .services import services_bp
from .addresses import addresses_bp
from .bookings import bookings_bp
from .assessments import assessments_bp
from .checkout import checkout_bp
from .stripe_webhook import webhook_bp

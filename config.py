import os

from dotenv import load_dotenv
from flask import current_app

from utils.errors import ConfigurationError

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

load_dotenv(os.path.join(BASE_DIR, ".env"))

# Secrets the payment flow and auth cannot run without
REQUIRED_SETTINGS = (
    "STRIPE_SECRET_KEY",
    "STRIPE_WEBHOOK_SECRET",
    "IDENTITY_PROVIDER_SECRET",
    "SQLALCHEMY_DATABASE_URI",
)

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as lawncare.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "lawncare.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Payment provider
    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
    STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")
    CHECKOUT_CURRENCY = os.getenv("CHECKOUT_CURRENCY", "usd")
    STRIPE_MINIMUM_CHARGE_CENTS = int(os.getenv("STRIPE_MINIMUM_CHARGE_CENTS", "50"))
    STRIPE_METADATA_VALUE_MAX = 500  # provider limit per metadata value

    # Base URL of the website, used for checkout success/cancel redirects
    APP_BASE_URL = os.getenv("APP_BASE_URL") or os.getenv("NEXT_PUBLIC_APP_URL")

    # Hosted identity provider session tokens
    IDENTITY_PROVIDER_SECRET = os.getenv("IDENTITY_PROVIDER_SECRET")
    IDENTITY_TOKEN_ALGORITHMS = os.getenv("IDENTITY_TOKEN_ALGORITHMS", "HS256").split(",")
    IDENTITY_TOKEN_ISSUER = os.getenv("IDENTITY_TOKEN_ISSUER")
    IDENTITY_TOKEN_AUDIENCE = os.getenv("IDENTITY_TOKEN_AUDIENCE")
    AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "__session")

    # Time-slot anchors stored as the booking time
    MORNING_ANCHOR = os.getenv("MORNING_ANCHOR", "08:00")
    AFTERNOON_ANCHOR = os.getenv("AFTERNOON_ANCHOR", "13:00")

    # Cancelled/Completed bookings are final unless this is switched on
    ALLOW_TERMINAL_STATUS_CHANGES = os.getenv("ALLOW_TERMINAL_STATUS_CHANGES", "false").lower() == "true"

    DEFAULT_COUNTRY = os.getenv("DEFAULT_COUNTRY", "Guyana")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Only for local debugging: include internal error detail in responses
    EXPOSE_ERROR_DETAILS = os.getenv("EXPOSE_ERROR_DETAILS", "false").lower() == "true"

    # Basic app settings
    DEBUG = False


def missing_settings(config) -> list:
    return [name for name in REQUIRED_SETTINGS if not config.get(name)]


def require_setting(name: str):
    """Return a config value or raise ConfigurationError if it is unset."""
    value = current_app.config.get(name)
    if not value:
        raise ConfigurationError(f"{name} is not configured")
    return value

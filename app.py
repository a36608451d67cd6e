import logging

from flask import Flask, jsonify
from flask_migrate import Migrate
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import Config, missing_settings
from domain.checkout import init_stripe
from routes import (
    health_bp, services_bp, addresses_bp, bookings_bp,
    assessments_bp, checkout_bp, webhook_bp,
)
from models import db
from utils.auth_context import load_current_user
from utils.errors import AppError, StorageError
from utils.responses import fail

logger = logging.getLogger(__name__)


def _configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger().setLevel(level)
    # stripe logs every request at INFO
    logging.getLogger("stripe").setLevel(logging.WARNING)


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    _configure_logging(app)

    missing = missing_settings(app.config)
    if missing:
        logger.warning("Missing required settings: %s", ", ".join(missing))

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(services_bp)
    app.register_blueprint(addresses_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(assessments_bp)
    app.register_blueprint(checkout_bp)
    app.register_blueprint(webhook_bp)

    # Database init (one pool per process)
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # Payment provider client, configured once
    init_stripe(app)

    @app.before_request
    def _load_user():
        load_current_user()

    @app.errorhandler(AppError)
    def _handle_app_error(exc):
        if exc.status_code >= 500:
            logger.error("%s: %s", type(exc).__name__, exc.log_detail or exc.message)
        body = exc.to_dict()
        if app.config.get("EXPOSE_ERROR_DETAILS") and exc.log_detail:
            body["debug"] = exc.log_detail
        return jsonify(body), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def _handle_db_error(exc):
        db.session.rollback()
        logger.exception("Database error")
        return _handle_app_error(StorageError(log_detail=str(exc)))

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc):
        return fail(exc.description or exc.name, exc.code)

    @app.errorhandler(Exception)
    def _handle_unexpected(exc):
        logger.exception("Unhandled error")
        return fail(StorageError.message, 500)

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        # JSON API only; the website is served separately
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp


    register_cli(app)


    return app

#-------------------------
from decimal import Decimal, InvalidOperation

import click
from models.booking import Booking
from utils.seed import cleanup_duplicate_services, seed_services, set_custom_service_price

def register_cli(app):
    @app.cli.command("seed-services")
    def seed_services_cmd():
        """Insert the default service catalogue (idempotent)."""
        created = seed_services()
        for service in created:
            click.echo(f"Created service: {service.name} ({service.id})")
        click.echo(f"{len(created)} service(s) created")

    @app.cli.command("cleanup-duplicate-services")
    def cleanup_duplicate_services_cmd():
        """Remove duplicate catalogue rows, keeping the oldest of each."""
        removed = cleanup_duplicate_services()
        for service_id, name in removed:
            click.echo(f"Deleted duplicate: {name} ({service_id})")
        click.echo(f"{len(removed)} duplicate(s) removed")

    @app.cli.command("set-custom-service-price")
    @click.argument("amount")
    def set_custom_service_price_cmd(amount):
        """Set the up-front price of custom (assessment) services."""
        try:
            price = Decimal(amount).quantize(Decimal("0.01"))
        except InvalidOperation:
            raise click.BadParameter("amount must be a number, e.g. 5.00")
        if price < 0:
            raise click.BadParameter("amount cannot be negative")
        count = set_custom_service_price(price)
        click.echo(f"Updated {count} custom service(s) to ${price}")

    @app.cli.command("recent-bookings")
    @click.option("--limit", default=10, show_default=True, type=int)
    def recent_bookings_cmd(limit):
        """Print the most recently created bookings."""
        rows = Booking.query.order_by(Booking.created_at.desc()).limit(limit).all()
        if not rows:
            click.echo("No bookings found")
            return
        for b in rows:
            click.echo(
                f"{b.id}  user={b.clerk_user_id}  service={b.service.name if b.service else b.service_id}  "
                f"{b.booking_date.isoformat()} {b.booking_time.strftime('%H:%M')}  {b.status}  "
                f"${b.price_at_booking:.2f}  session={b.stripe_checkout_session_id}"
            )

#-------------------------




if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)

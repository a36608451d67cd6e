import json
import logging

from flask import has_request_context, request
from models import db
from models.audit_log import AuditLog

logger = logging.getLogger(__name__)


def _client_fingerprint():
    # webhook handlers and CLI commands may run outside a request
    if not has_request_context():
        return None, None
    forwarded = request.headers.get("X-Forwarded-For", "")
    ip = forwarded.split(",")[0].strip() or request.remote_addr
    user_agent = request.headers.get("User-Agent") or None
    return ip, user_agent[:255] if user_agent else None


def log_event(action: str, user_id=None, entity=None, entity_id=None, metadata=None):
    """Persist one audit row and mirror it to the application log."""
    ip, user_agent = _client_fingerprint()
    db.session.add(AuditLog(
        user_id=user_id,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        ip=ip,
        user_agent=user_agent,
        # JSON column; Decimals and dates are stored as strings
        details=json.loads(json.dumps(metadata, default=str)) if metadata else None,
    ))
    db.session.commit()
    logger.info("%s %s=%s user=%s", action, entity, entity_id, user_id)

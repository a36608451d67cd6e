import logging
from functools import wraps

from flask import g
from security.identity import InvalidIdentityToken, get_token_from_request, verify_identity_token
from utils.errors import AuthenticationRequired

logger = logging.getLogger(__name__)

def load_current_user():
    g.user_id = None
    g.claims = None

    token = get_token_from_request()
    if not token:
        return

    try:
        claims = verify_identity_token(token)
    except InvalidIdentityToken as exc:
        logger.debug("Ignoring invalid identity token: %s", exc)
        return

    g.claims = claims
    g.user_id = claims["sub"]

def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "user_id", None) is None:
            raise AuthenticationRequired()
        return fn(*args, **kwargs)
    return wrapper

from flask import current_app, request
from jose import JWTError, jwt

from config import require_setting


class InvalidIdentityToken(Exception):
    pass


def get_token_from_request():
    """Bearer header first, then the identity provider's session cookie."""
    auth_header = request.headers.get("Authorization", "")
    scheme, _, credentials = auth_header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()

    cookie_name = current_app.config.get("AUTH_COOKIE_NAME", "__session")
    return request.cookies.get(cookie_name) or None


def verify_identity_token(token: str) -> dict:
    """
    Verifies a session token issued by the hosted identity provider and
    returns its claims. The user id is the ``sub`` claim.
    """
    secret = require_setting("IDENTITY_PROVIDER_SECRET")
    algorithms = current_app.config.get("IDENTITY_TOKEN_ALGORITHMS", ["HS256"])
    issuer = current_app.config.get("IDENTITY_TOKEN_ISSUER")
    audience = current_app.config.get("IDENTITY_TOKEN_AUDIENCE")

    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=algorithms,
            issuer=issuer,
            audience=audience,
            options={"verify_aud": audience is not None},
        )
    except JWTError as exc:
        raise InvalidIdentityToken(str(exc)) from exc

    if not claims.get("sub"):
        raise InvalidIdentityToken("token has no subject")
    return claims

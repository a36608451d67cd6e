import logging

from sqlalchemy.exc import IntegrityError

from models import db
from models.profile import Profile

logger = logging.getLogger(__name__)


def sync_profile(user_id: str) -> Profile:
    """Make sure the identity-provider user has a local profile row."""
    profile = Profile.query.filter_by(clerk_user_id=user_id).first()
    if profile:
        return profile

    profile = Profile(clerk_user_id=user_id)
    db.session.add(profile)
    try:
        db.session.commit()
    except IntegrityError:
        # created by a concurrent request
        db.session.rollback()
        return Profile.query.filter_by(clerk_user_id=user_id).first()

    logger.info("Created profile for user %s", user_id)
    return profile

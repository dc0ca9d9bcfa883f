# quotebook/auth/bootstrap.py
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from quotebook.auth.passwords import hash_password
from quotebook.core.logging_config import logger
from quotebook.core.settings import Settings, settings as default_settings
from quotebook.models.user import User


def ensure_default_admin(db: Session, settings: Optional[Settings] = None) -> bool:
    """
    Create the default account when it does not exist yet.

    Idempotent: an existing account (and its password) is left untouched.
    Returns True when the account was created.
    """
    s = settings or default_settings
    username = s.DEFAULT_ADMIN_USERNAME

    existing = db.scalars(select(User).where(User.username == username)).first()
    if existing:
        return False

    db.add(
        User(
            username=username,
            password_hash=hash_password(s.DEFAULT_ADMIN_PASSWORD),
            name=s.DEFAULT_ADMIN_NAME,
            email=s.DEFAULT_ADMIN_EMAIL,
            is_active=True,
        )
    )
    db.commit()
    logger.info("default_user_created", username=username)
    return True

# scripts/seed_admin.py
"""
Create the default account, or reset its password with --reset.

    python -m scripts.seed_admin
    python -m scripts.seed_admin --reset
"""
import argparse

from sqlalchemy import select

from quotebook import models  # noqa: F401
from quotebook.auth.bootstrap import ensure_default_admin
from quotebook.auth.passwords import hash_password
from quotebook.core.logging_config import setup_logging
from quotebook.core.settings import settings
from quotebook.db import Base, SessionLocal, engine
from quotebook.models.user import User


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="reset the password of an existing account")
    args = parser.parse_args()

    setup_logging()
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if ensure_default_admin(db):
            print("✅ user created:", settings.DEFAULT_ADMIN_USERNAME)
        elif args.reset:
            user = db.scalars(
                select(User).where(User.username == settings.DEFAULT_ADMIN_USERNAME)
            ).one()
            user.password_hash = hash_password(settings.DEFAULT_ADMIN_PASSWORD)
            user.is_active = True
            db.commit()
            print("✅ user updated/reset password:", settings.DEFAULT_ADMIN_USERNAME)
        else:
            print("user already exists:", settings.DEFAULT_ADMIN_USERNAME)

        print("\nLOGIN WITH:")
        print("username:", settings.DEFAULT_ADMIN_USERNAME)
    finally:
        db.close()


if __name__ == "__main__":
    main()

from datetime import datetime, timedelta, timezone

import jwt

from quotebook.core.settings import settings


def create_access_token(*, user_id: str, username: str) -> str:
    now = datetime.now(timezone.utc)

    payload = {
        "sub": user_id,
        "username": username,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=settings.JWT_EXP_HOURS)).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])

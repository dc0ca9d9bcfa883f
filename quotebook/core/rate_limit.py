# quotebook/core/rate_limit.py
from slowapi import Limiter
from slowapi.util import get_remote_address

from quotebook.core.settings import settings


def _client_key(request) -> str:
    # per client address and bearer token, so users behind one NAT don't share a bucket
    auth = request.headers.get("authorization", "")
    token = request.cookies.get("access_token") or auth[-16:] or "anon"
    return f"{get_remote_address(request)}:{token[-16:]}"


# one shared Limiter for the whole app
limiter = Limiter(key_func=_client_key, enabled=settings.RATE_LIMIT_ENABLED)

"""Rate limiting utilities"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

from ..config import settings


def get_session_rate_limit_key(request: Request) -> str:
    """
    Get rate limit key based on the storefront session

    Falls back to IP address outside session-scoped routes.
    """
    session_id = request.path_params.get("session_id")
    if session_id:
        return f"session:{session_id}"

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_session_rate_limit_key,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window"
)

"""
Shared route dependencies: client identity, rate limits and sessions.
"""
from fastapi import Depends, Request
from app.core.config import settings
from app.core.errors import Unauthorized
from app.core.rate_limit import RateLimiter, auth_limiter, api_limiter
from app.core.sessions import SessionData, SessionManager, get_session_manager


def get_client_id(request: Request) -> str:
    """Network identity used to key rate-limit windows."""
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def _limit(limiter: RateLimiter):
    def dependency(request: Request) -> None:
        limiter.hit(get_client_id(request))
    return dependency


auth_rate_limit = _limit(auth_limiter)
api_rate_limit = _limit(api_limiter)


def get_session_token(request: Request):
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_optional_session(
    request: Request,
    manager: SessionManager = Depends(get_session_manager)
):
    """Live session for this request, or None when anonymous."""
    return manager.resolve(get_session_token(request))


def get_current_session(
    session=Depends(get_optional_session)
) -> SessionData:
    """Require an authenticated session."""
    if session is None:
        raise Unauthorized()
    return session

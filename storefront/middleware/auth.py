"""
Storefront API — Authentication Guard
=======================================

What:  Route guard that admits only requests carrying a live token.
How:   Reads the token from `Authorization: Bearer <token>` or, failing
       that, from the auth cookie set by POST /login, then asks the app's
       AuthService to verify it. On success the identity is stored on
       request.state.user; on failure UnauthorizedError short circuits the
       chain with a 401.
"""

import logging
from typing import Optional

from starlette.requests import Request

from storefront.config import settings
from storefront.exceptions import UnauthorizedError
from storefront.services.auth_service import AuthenticatedUser, AuthService

logger = logging.getLogger(__name__)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def extract_token(request: Request) -> Optional[str]:
    """Bearer header first, then the auth cookie."""
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(settings.auth_cookie_name) or None


async def require_auth(request: Request) -> AuthenticatedUser:
    """
    Raises:
        UnauthorizedError: no token, or the token is not currently valid
    """
    try:
        user = get_auth_service(request).verify(extract_token(request))
    except UnauthorizedError as e:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, e.reason)
        raise
    request.state.user = user
    return user

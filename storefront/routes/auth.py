"""
Storefront API — Login / Logout Route Handlers
================================================

What:  Issues and revokes the bearer token used by the /api/v2 routes.
How:   POST /login verifies credentials, opens a session and sets the token
       as an HttpOnly cookie (also returned in the body for header use).
       GET or POST /logout revokes the session and clears the cookie.

Cookie attributes:
    HttpOnly:  not readable from page scripts
    SameSite:  lax
    Secure:    settings.auth_cookie_secure (enable behind HTTPS)
    Max-Age:   settings.token_ttl_seconds
"""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.config import settings
from storefront.database import get_db_session
from storefront.middleware.auth import extract_token, get_auth_service
from storefront.schemas.common import ErrorResponse
from storefront.schemas.user import LoginRequest, LoginResponse, LogoutResponse
from storefront.services.auth_service import AuthService

router = APIRouter(tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"description": "Invalid username or password", "model": ErrorResponse}},
    summary="Log in and receive a token",
)
async def login(
    body: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    issued = await auth_service.login(db, body.username, body.password)
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=issued.token,
        max_age=int(auth_service.token_ttl),
        httponly=True,
        samesite="lax",
        secure=settings.auth_cookie_secure,
    )
    return LoginResponse(token=issued.token, expires_at=issued.expires_at)


@router.api_route(
    "/logout",
    methods=["GET", "POST"],
    response_model=LogoutResponse,
    summary="Log out and invalidate the current token",
)
async def logout(
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
) -> LogoutResponse:
    auth_service.logout(extract_token(request))
    response.delete_cookie(key=settings.auth_cookie_name, httponly=True, samesite="lax")
    return LogoutResponse()

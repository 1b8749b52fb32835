"""
Storefront API — User Route Handlers
======================================

POST /users creates a login account. Never guarded: it is how the first
account gets made.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db_session
from storefront.schemas.common import ErrorResponse
from storefront.schemas.user import UserCreate, UserResponse
from storefront.services.user_service import user_service

router = APIRouter(tags=["Users"])


@router.post(
    "/users",
    response_model=UserResponse,
    responses={500: {"description": "Store error (e.g. username taken)", "model": ErrorResponse}},
    summary="Create a new user",
)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db_session),
):
    return await user_service.create_user(db, body.username, body.password)

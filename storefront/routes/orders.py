"""
Storefront API — Order Route Handlers
=======================================

Orders are create-only: POST /orders.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db_session
from storefront.schemas.common import ErrorResponse
from storefront.schemas.order import OrderCreate, OrderResponse
from storefront.services.crud_service import order_service

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post(
    "",
    response_model=OrderResponse,
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="Create a new order",
)
async def create_order(
    body: OrderCreate,
    db: AsyncSession = Depends(get_db_session),
):
    return await order_service.create(db, body.model_dump(exclude_unset=True))

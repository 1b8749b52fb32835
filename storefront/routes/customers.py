"""
Storefront API — Customer Route Handlers
==========================================

What:  CRUD and search endpoints for customers; same shape as products.
       Search matches first_name or last_name.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db_session
from storefront.schemas.common import ErrorResponse
from storefront.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate
from storefront.services.crud_service import customer_service

router = APIRouter(prefix="/customers", tags=["Customers"])

_NOT_FOUND = {404: {"description": "Customer not found", "model": ErrorResponse}}
_SERVER_ERROR = {500: {"description": "Store error", "model": ErrorResponse}}


@router.post(
    "",
    response_model=CustomerResponse,
    responses=_SERVER_ERROR,
    summary="Create a new customer",
)
async def create_customer(
    body: CustomerCreate,
    db: AsyncSession = Depends(get_db_session),
):
    return await customer_service.create(db, body.model_dump(exclude_unset=True))


@router.put(
    "",
    response_model=CustomerResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Update a customer",
)
async def update_customer(
    body: CustomerUpdate,
    db: AsyncSession = Depends(get_db_session),
):
    fields = body.model_dump(exclude_unset=True, exclude={"id"})
    return await customer_service.update(db, body.id, fields)


@router.delete(
    "/{customer_id}",
    response_model=CustomerResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Delete a customer",
)
async def delete_customer(
    customer_id: int,
    db: AsyncSession = Depends(get_db_session),
):
    return await customer_service.delete(db, customer_id)


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Get a customer by id",
)
async def get_customer(
    customer_id: int,
    db: AsyncSession = Depends(get_db_session),
):
    return await customer_service.get_one(db, customer_id)


@router.get(
    "",
    response_model=List[CustomerResponse],
    responses=_SERVER_ERROR,
    summary="Get all customers",
)
async def get_customers(db: AsyncSession = Depends(get_db_session)):
    return await customer_service.get_all(db)


@router.get(
    "/q/{term}",
    response_model=List[CustomerResponse],
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Search customers by term",
)
async def get_customers_by_term(
    term: str,
    db: AsyncSession = Depends(get_db_session),
):
    return await customer_service.search(db, term)

"""
Storefront API — Product Route Handlers
=========================================

What:  CRUD and search endpoints for products.
How:   Each handler makes exactly one call to product_service and lets the
       global exception handlers turn NotFoundError / StoreError into 404 / 500.
Who:   Mounted under /api/v1 and /api/v2 by storefront.routes.api, which
       also attaches the rate limit (and, for v2, auth) guards.

Endpoints:
    POST   /products              create
    PUT    /products              update (id in body)
    DELETE /products/{product_id} delete
    GET    /products/{product_id} get one
    GET    /products              get all (unpaginated)
    GET    /products/q/{term}     search name/category, 404 when empty
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db_session
from storefront.schemas.common import ErrorResponse
from storefront.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from storefront.services.crud_service import product_service

router = APIRouter(prefix="/products", tags=["Products"])

_NOT_FOUND = {404: {"description": "Product not found", "model": ErrorResponse}}
_SERVER_ERROR = {500: {"description": "Store error", "model": ErrorResponse}}


@router.post(
    "",
    response_model=ProductResponse,
    responses=_SERVER_ERROR,
    summary="Create a new product",
)
async def create_product(
    body: ProductCreate,
    db: AsyncSession = Depends(get_db_session),
):
    return await product_service.create(db, body.model_dump(exclude_unset=True))


@router.put(
    "",
    response_model=ProductResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Update a product",
)
async def update_product(
    body: ProductUpdate,
    db: AsyncSession = Depends(get_db_session),
):
    fields = body.model_dump(exclude_unset=True, exclude={"id"})
    return await product_service.update(db, body.id, fields)


@router.delete(
    "/{product_id}",
    response_model=ProductResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Delete a product",
)
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db_session),
):
    return await product_service.delete(db, product_id)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Get a product by id",
)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db_session),
):
    return await product_service.get_one(db, product_id)


@router.get(
    "",
    response_model=List[ProductResponse],
    responses=_SERVER_ERROR,
    summary="Get all products",
)
async def get_products(db: AsyncSession = Depends(get_db_session)):
    return await product_service.get_all(db)


@router.get(
    "/q/{term}",
    response_model=List[ProductResponse],
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Search products by term",
    description="Substring match on name or category. Returns 404 when nothing matches.",
)
async def get_products_by_term(
    term: str,
    db: AsyncSession = Depends(get_db_session),
):
    return await product_service.search(db, term)

"""
Storefront API — Product Schemas
==================================

What:  Request/response models for the /products endpoints.
Why:   The API accepts any subset of product fields; only types are checked.
       Uniqueness and other constraints are left to the database.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ProductFields(BaseModel):
    """Writable product columns, all optional."""
    name: Optional[str] = Field(default=None, description="Product name")
    description: Optional[str] = Field(default=None, description="Long description")
    category: Optional[str] = Field(default=None, description="Category label")
    price: Optional[float] = Field(default=None, description="Unit price")
    image_url: Optional[str] = Field(default=None, description="Image URL")


class ProductCreate(ProductFields):
    """
    Body of POST /products.

    product_id may be supplied; when omitted the database assigns one.
    """
    product_id: Optional[int] = Field(default=None, description="Explicit product id")


class ProductUpdate(ProductFields):
    """Body of PUT /products. Fields that are not sent keep their stored value."""
    id: int = Field(description="Id of the product to update")


class ProductResponse(BaseModel):
    product_id: int
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    image_url: Optional[str] = None

    model_config = {"from_attributes": True}

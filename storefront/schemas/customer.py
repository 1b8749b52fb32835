"""
Storefront API — Customer Schemas
===================================

What:  Request/response models for the /customers endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CustomerFields(BaseModel):
    """Writable customer columns, all optional."""
    first_name: Optional[str] = Field(default=None, description="Given name")
    last_name: Optional[str] = Field(default=None, description="Family name")
    address: Optional[str] = Field(default=None, description="Postal address")
    email: Optional[str] = Field(default=None, description="Email address")
    phone_number: Optional[str] = Field(default=None, description="Phone number")


class CustomerCreate(CustomerFields):
    customer_id: Optional[int] = Field(default=None, description="Explicit customer id")


class CustomerUpdate(CustomerFields):
    """Body of PUT /customers. Fields that are not sent keep their stored value."""
    id: int = Field(description="Id of the customer to update")


class CustomerResponse(BaseModel):
    customer_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None

    model_config = {"from_attributes": True}

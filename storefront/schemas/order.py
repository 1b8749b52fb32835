"""
Storefront API — Order Schemas
================================
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class OrderCreate(BaseModel):
    """
    Body of POST /orders.

    quantity defaults to 1 and order_date to the current UTC time when
    omitted.
    """
    order_id: Optional[int] = Field(default=None, description="Explicit order id")
    customer_id: Optional[int] = Field(default=None, description="Ordering customer")
    product_id: Optional[int] = Field(default=None, description="Ordered product")
    quantity: Optional[int] = Field(default=None, description="Units ordered")
    order_date: Optional[datetime] = Field(default=None, description="When the order was placed")


class OrderResponse(BaseModel):
    order_id: int
    customer_id: Optional[int] = None
    product_id: Optional[int] = None
    quantity: int
    order_date: datetime

    model_config = {"from_attributes": True}

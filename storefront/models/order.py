"""
Storefront API — Order SQLAlchemy Model
=========================================

What:  ORM model representing the `orders` table.
Why:   Orders link a customer to a product; the API only creates them.
Who:   Used by the order CrudService and by Alembic.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from storefront.database import Base


class Order(Base):
    """
    A single-product order placed by a customer.

    Foreign keys reference customers and products; whether a dangling key is
    rejected is up to the database (SQLite does not enforce them by default).
    """

    __tablename__ = "orders"

    order_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("customers.customer_id"), nullable=True
    )
    product_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("products.product_id"), nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Python-side default: the value is on the instance right after flush,
    # so serializing a freshly created order never needs a reload
    order_date: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return (
            f"<Order(order_id={self.order_id}, customer_id={self.customer_id}, "
            f"product_id={self.product_id}, quantity={self.quantity})>"
        )

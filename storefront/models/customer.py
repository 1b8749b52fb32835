"""
Storefront API — Customer SQLAlchemy Model
============================================

What:  ORM model representing the `customers` table.
Who:   Used by the customer CrudService and by Alembic.

Search:
    GET /customers/q/{term} matches `first_name` OR `last_name`.
"""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.database import Base


class Customer(Base):
    """A customer record. No uniqueness constraints beyond the key."""

    __tablename__ = "customers"

    customer_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<Customer(customer_id={self.customer_id}, "
            f"name='{self.first_name} {self.last_name}')>"
        )

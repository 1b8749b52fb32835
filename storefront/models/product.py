"""
Storefront API — Product SQLAlchemy Model
===========================================

What:  ORM model representing the `products` table.
Who:   Used by the product CrudService for CRUD and search, and by Alembic.

Search:
    GET /products/q/{term} matches `name` OR `category` with LIKE '%term%'.
    Case sensitivity follows the database collation (PostgreSQL: sensitive,
    SQLite: insensitive for ASCII).
"""

from typing import Optional

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.database import Base


class Product(Base):
    """A catalogue item. Every column except the key is optional."""

    __tablename__ = "products"

    product_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    # Float (not Numeric) so prices serialize as JSON numbers
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    def __repr__(self) -> str:
        return f"<Product(product_id={self.product_id}, name='{self.name}')>"

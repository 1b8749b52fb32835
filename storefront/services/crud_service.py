"""
Storefront API — Generic CRUD Service
=======================================

What:  One store operation per method (create, update, delete, get one,
       get all, search) for any of the ORM models.
Why:   Customers, products and orders differ only in their table and in which
       text columns a search looks at; the handlers are otherwise identical.
How:   Each method performs a single SQLAlchemy call on the request's session,
       converts "no row" into NotFoundError and wraps every other failure in
       StoreError.
Who:   Called by the route handlers in storefront/routes/.

Error Handling Strategy:
    NotFoundError  → propagated as-is (404)
    anything else  → logged with traceback, re-raised as StoreError (500)
                     carrying the original error's type and message
"""

import logging
from typing import Any, Dict, Generic, List, Sequence, Type, TypeVar

from sqlalchemy import inspect, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import Base
from storefront.exceptions import NotFoundError, StoreError
from storefront.models.customer import Customer
from storefront.models.order import Order
from storefront.models.product import Product

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class CrudService(Generic[ModelT]):
    """
    Store adapter for a single entity.

    Args:
        model:          ORM class backing the entity
        resource:       Singular name used in messages ("product")
        search_fields:  Column names matched by search(); empty disables search
    """

    def __init__(
        self,
        model: Type[ModelT],
        resource: str,
        search_fields: Sequence[str] = (),
    ):
        self.model = model
        self.resource = resource
        self.search_fields = tuple(search_fields)
        self.key_column = inspect(model).primary_key[0]

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(self, db: AsyncSession, fields: Dict[str, Any]) -> ModelT:
        """
        Insert a new row from `fields` and return it with store-assigned
        values (generated key, column defaults) populated.

        Raises:
            StoreError: constraint violation or any other database failure
        """
        try:
            record = self.model(**fields)
            db.add(record)
            # Flush here so constraint violations surface inside this try
            await db.flush()
            await db.refresh(record)
            logger.info("Created %s %s", self.resource, self._key_of(record))
            return record
        except Exception as e:
            raise self._store_failure("create", e)

    async def update(self, db: AsyncSession, key: Any, fields: Dict[str, Any]) -> ModelT:
        """
        Apply `fields` to the row identified by `key`. Columns absent from
        `fields` are left untouched.

        Raises:
            NotFoundError: no row with that key
            StoreError:    any other database failure
        """
        try:
            record = await db.get(self.model, key)
            if record is None:
                raise NotFoundError(resource=self.resource, resource_id=key)
            for name, value in fields.items():
                setattr(record, name, value)
            await db.flush()
            logger.info("Updated %s %s (%s)", self.resource, key, ", ".join(fields) or "no fields")
            return record
        except NotFoundError:
            raise
        except Exception as e:
            raise self._store_failure("update", e, key=key)

    async def delete(self, db: AsyncSession, key: Any) -> ModelT:
        """
        Delete the row identified by `key` and return it as it was.

        Raises:
            NotFoundError: no row with that key
            StoreError:    any other database failure
        """
        try:
            record = await db.get(self.model, key)
            if record is None:
                raise NotFoundError(resource=self.resource, resource_id=key)
            await db.delete(record)
            await db.flush()
            logger.info("Deleted %s %s", self.resource, key)
            return record
        except NotFoundError:
            raise
        except Exception as e:
            raise self._store_failure("delete", e, key=key)

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_one(self, db: AsyncSession, key: Any) -> ModelT:
        """Primary-key lookup. Raises NotFoundError when absent."""
        try:
            record = await db.get(self.model, key)
        except Exception as e:
            raise self._store_failure("get", e, key=key)
        if record is None:
            raise NotFoundError(resource=self.resource, resource_id=key)
        return record

    async def get_all(self, db: AsyncSession) -> List[ModelT]:
        """
        Every row, ordered by key.

        No pagination: the whole table is returned in one response.
        """
        try:
            result = await db.execute(select(self.model).order_by(self.key_column))
            return list(result.scalars().all())
        except Exception as e:
            raise self._store_failure("list", e)

    async def search(self, db: AsyncSession, term: str) -> List[ModelT]:
        """
        Rows where any search field contains `term` as a substring.

        The comparison is SQL LIKE '%term%' with `%` and `_` in the term
        escaped, so case sensitivity is whatever the database collation says.
        An empty result is a NotFoundError, not an empty list.
        """
        if not self.search_fields:
            raise NotFoundError(resource=self.resource, message=f"{self.resource} search is not supported")
        conditions = [
            getattr(self.model, field).contains(term, autoescape=True)
            for field in self.search_fields
        ]
        try:
            result = await db.execute(
                select(self.model).where(or_(*conditions)).order_by(self.key_column)
            )
            records = list(result.scalars().all())
        except Exception as e:
            raise self._store_failure("search", e, term=term)
        if not records:
            raise NotFoundError(resource=self.resource, context={"term": term})
        return records

    # ── Helpers ───────────────────────────────────────────────────────────

    def _key_of(self, record: ModelT) -> Any:
        return getattr(record, self.key_column.key)

    def _store_failure(self, action: str, exc: Exception, **context: Any) -> StoreError:
        logger.error(
            "Store error during %s %s: %s",
            self.resource,
            action,
            str(exc),
            exc_info=True,
        )
        return StoreError(
            message=f"Could not {action} {self.resource}",
            original=exc,
            context={"resource": self.resource, **context},
        )


# ── Singleton Instances ───────────────────────────────────────────────────
# Stateless: the session is passed to every call
customer_service: CrudService[Customer] = CrudService(
    Customer, "customer", search_fields=("first_name", "last_name")
)
product_service: CrudService[Product] = CrudService(
    Product, "product", search_fields=("name", "category")
)
order_service: CrudService[Order] = CrudService(Order, "order")

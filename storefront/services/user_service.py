"""
Storefront API — User Service
===============================

What:  Account creation and username lookup.
Why:   Users are a CRUD entity like the others, except the password must be
       hashed on the way in and the lookup key for login is the username.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from storefront.models.user import User
from storefront.services.crud_service import CrudService
from storefront.services.passwords import hash_password

logger = logging.getLogger(__name__)


class UserService(CrudService[User]):

    def __init__(self):
        super().__init__(User, "user")

    async def create_user(self, db: AsyncSession, username: str, password: str) -> User:
        """
        Store a new user with a hashed password.

        Hashing is CPU-bound, so it runs in the threadpool instead of on the
        event loop. A duplicate username fails on the unique constraint and
        surfaces as StoreError.
        """
        password_hash = await run_in_threadpool(hash_password, password)
        return await self.create(db, {"username": username, "password_hash": password_hash})

    async def get_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()
        except Exception as e:
            raise self._store_failure("get", e, username=username)


user_service = UserService()

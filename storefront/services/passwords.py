"""
Password hashing and verification using passlib.

pbkdf2_sha256 is implemented by passlib itself on top of hashlib, so no
native backend is required.
"""

from typing import Optional

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: Optional[str], hashed_password: Optional[str]) -> bool:
    """
    Verify a plaintext password against a stored hash.

    With no stored hash (unknown user) a dummy verification still runs, so
    the time taken does not reveal whether the username exists.
    """
    if plain_password is None or hashed_password is None:
        pwd_context.dummy_verify()
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unrecognized or corrupt hash
        return False

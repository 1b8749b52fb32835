"""
Storefront API — User & Auth Schemas
======================================

What:  Models for POST /users, POST /login and /logout.
Why:   Keeps the password out of every response: UserResponse has no
       password field at all.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=150, description="Login name")
    password: str = Field(min_length=1, description="Plaintext password (hashed before storage)")


class UserResponse(BaseModel):
    user_id: int
    username: str
    created_at: datetime

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    username: str = Field(description="Login name")
    password: str = Field(description="Plaintext password")


class LoginResponse(BaseModel):
    """
    What:  Returned by POST /login.
    Why:   The token is also set as an HttpOnly cookie; returning it in the
           body lets non-browser clients send it as a Bearer header instead.
    """
    message: str = Field(default="Logged in successfully")
    token: str = Field(description="Opaque bearer token")
    token_type: str = Field(default="bearer")
    expires_at: datetime = Field(description="When the token stops being accepted (UTC)")


class LogoutResponse(BaseModel):
    message: str = Field(default="Logged out successfully")

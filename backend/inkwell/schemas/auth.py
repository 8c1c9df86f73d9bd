"""
Inkwell Backend: Account and Token Schemas
===========================================

What:  Request bodies for /auth, the token response, and the decoded token
       payload.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    token: str


class UserResponse(BaseModel):
    """Profile of the calling user. Returned by GET /auth/me."""
    id: uuid.UUID
    username: str
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}


# ── Token payload ─────────────────────────────────────────────────────────
# Shape: {"user": {"id": "<uuid>"}, "iat": ..., "exp": ...}


class TokenUser(BaseModel):
    id: uuid.UUID


class TokenPayload(BaseModel):
    """Decoded JWT body. Validation failure means the token is not ours."""
    user: TokenUser

"""
Inkwell Backend: Post Request/Response Schemas
===============================================

What:  Pydantic models defining the JSON contract of the /posts endpoints.
Why:   FastAPI validates request bodies against these and serializes
       responses through them, so the password hash or any other User column
       cannot leak into a post payload by accident.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostCreate(BaseModel):
    """Body of POST /posts/create."""
    title: str = Field(description="Post title")
    content: str = Field(description="Post body")
    image: Optional[str] = Field(default=None, description="Optional image URL")


class PostUpdate(BaseModel):
    """
    Body of PUT /posts/{id}.

    Every field is optional. A field that is omitted, null, or falsy (such as
    an empty string) leaves the stored value unchanged.
    """
    title: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class AuthorResponse(BaseModel):
    """Public profile of a post's author. Never carries credentials."""
    id: uuid.UUID
    username: str

    model_config = {"from_attributes": True}


class PostResponse(BaseModel):
    """
    What:  Full representation of a post.
    Who:   Returned by create, list, get and update.

    `author` is null only if the author's account has been removed out from
    under the post.
    """
    id: uuid.UUID = Field(description="Unique post identifier (UUID)")
    title: str
    content: str
    image: Optional[str] = None
    author: Optional[AuthorResponse] = Field(default=None, description="Resolved author profile")
    likes: List[str] = Field(default_factory=list, description="Liker user ids, newest first")
    created_at: datetime = Field(description="When the post was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the post was last written (UTC ISO 8601)")

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    """Plain confirmation, e.g. {"message": "Post removed"}."""
    message: str

"""
Inkwell Backend: User SQLAlchemy Model
=======================================

What:  ORM model for the `users` table.
Why:   Posts reference their author by user id; listings resolve that id to a
       public display name.
Who:   Written by the auth service at registration, read by the post
       repository when resolving authors.

Only `id` and `username` ever leave the API as part of a post. The password
hash is read by the login path and nowhere else.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.database import Base


class User(Base):
    """A registered author or reader."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier, embedded in issued tokens as user.id",
    )

    # Public display name shown next to each post
    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login identifier, stored lower-cased",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash produced by passlib; never serialized",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"

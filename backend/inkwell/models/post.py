"""
Inkwell Backend: Post SQLAlchemy Model
=======================================

What:  ORM model representing the `posts` table.
How:   One row per post. The like list lives in a JSON column on the row
       itself, so every post is a single self-contained document and a like
       toggle is a single-row write.
Who:   Read and written through PostRepository.

Table Design Rationale:
    - UUID primary key: ids are not guessable; malformed ids are cheap to
      reject before touching the store
    - author_id: set once at creation, never updated by any code path
    - likes: ordered list of user id strings, most recent like first
    - created_at: UTC, drives the newest-first listing order

    Index on created_at DESC:
        GET /posts/all always sorts by this column.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkwell.database import Base
from inkwell.models.user import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    """
    A blog post.

    Lifecycle:
        1. Created by an authenticated user, who becomes the author
        2. Title, content and image edited by the author only
        3. Like list toggled by any authenticated user
        4. Deleted permanently by the author
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    # What: Optional image reference (absolute URL or path served elsewhere)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # JSON everywhere, JSONB on PostgreSQL.
    # Always reassign a new list; in-place mutation is not change-tracked.
    likes: Mapped[List[str]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    # Loaded explicitly with selectinload(); lazy loading is not available
    # under AsyncSession.
    author: Mapped[Optional[User]] = relationship(User, lazy="raise")

    __table_args__ = (
        Index("idx_posts_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Post(id={self.id}, author_id={self.author_id}, "
            f"created_at='{self.created_at}')>"
        )

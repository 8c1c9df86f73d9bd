"""
Inkwell Backend: Post Repository
=================================

What:  All SQL that touches the `posts` table.
Why:   PostService reasons about ownership and likes; it should not also
       have to know how authors are eager-loaded or how rows are ordered.
How:   Thin async methods over an AsyncSession. Every read that returns a
       post eager-loads its author, because lazy loading is unavailable
       under asyncio.

The repository never commits. The request-scoped session in
`inkwell.database` commits once the handler has returned.
"""

import uuid
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inkwell.models.post import Post
from inkwell.models.user import User


class PostRepository:
    """Persistence operations for posts, bound to one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, post_id: uuid.UUID) -> Optional[Post]:
        """
        Fetch one post with its author.

        Query plan:
            SELECT * FROM posts WHERE id = :uuid  (primary key lookup)
            SELECT * FROM users WHERE id IN (...)  (selectin author load)
        """
        result = await self.db.execute(
            select(Post)
            .options(selectinload(Post.author))
            .where(Post.id == post_id)
        )
        return result.scalar_one_or_none()

    async def list_recent(self) -> List[Post]:
        """Every post, newest first, authors resolved."""
        result = await self.db.execute(
            select(Post)
            .options(selectinload(Post.author))
            .order_by(desc(Post.created_at))
        )
        return list(result.scalars().all())

    async def add(self, post: Post) -> Post:
        """Insert a new post; the id is assigned on flush."""
        self.db.add(post)
        await self.db.flush()
        return post

    async def save(self, post: Post) -> Post:
        """Write pending changes on an already-loaded post."""
        await self.db.flush()
        return post

    async def delete(self, post: Post) -> None:
        await self.db.delete(post)
        await self.db.flush()

    async def get_author(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

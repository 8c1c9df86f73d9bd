"""
Inkwell Backend: Post Service (Ownership and Like Rules)
=========================================================

What:  Business rules for posts: who may create, edit, delete and like.
How:   Each method receives the request's session (and claim, for private
       operations), works through PostRepository, and returns a response
       schema. HTTP never appears here.
Who:   Called by the /posts route handlers.

Authorization Rules:
    create  → any authenticated caller; the caller becomes the author
    list    → public
    get     → public
    update  → author only
    delete  → author only
    like    → any authenticated caller, toggles their own membership

Error Handling Strategy:
    Application exceptions (NotFoundError, NotAuthorizedError,
    AuthenticationError) propagate unchanged. Anything else raised while
    talking to the store is logged with its context and wrapped in
    DatabaseError, which the global handler reports as a generic 500.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.exceptions import (
    AuthenticationError,
    CredentialFailure,
    DatabaseError,
    InkwellError,
    NotAuthorizedError,
    NotFoundError,
)
from inkwell.models.post import Post
from inkwell.repositories.posts import PostRepository
from inkwell.schemas.post import MessageResponse, PostCreate, PostResponse, PostUpdate
from inkwell.security import Claim

logger = logging.getLogger(__name__)


def parse_post_id(raw_id: str) -> uuid.UUID:
    """
    Convert a path segment into a post id.

    A malformed id can never match a stored post, so it is reported exactly
    like a missing one.
    """
    try:
        return uuid.UUID(raw_id)
    except (ValueError, TypeError, AttributeError):
        raise NotFoundError(resource="post", resource_id=raw_id)


def toggle_membership(likes: List[str], user_id: str) -> List[str]:
    """
    Return a new like list with `user_id` flipped.

    Present → removed (other entries keep their order).
    Absent  → prepended.
    """
    if user_id in likes:
        return [liker for liker in likes if liker != user_id]
    return [user_id, *likes]


class PostService:
    """
    Business logic layer for post operations.

    Stateless: every method receives the session it should use, so a single
    module-level instance serves all requests.
    """

    async def create_post(
        self, db: AsyncSession, claim: Claim, payload: PostCreate
    ) -> PostResponse:
        """
        Create a post authored by the caller.

        Raises:
            AuthenticationError: the token names a user that no longer exists
            DatabaseError: the insert failed
        """
        repo = PostRepository(db)
        try:
            author = await repo.get_author(claim.user_id)
            if author is None:
                raise AuthenticationError(
                    CredentialFailure.INVALID,
                    context={"user_id": claim.subject, "reason": "unknown user"},
                )

            post = Post(
                title=payload.title,
                content=payload.content,
                image=payload.image,
                author=author,
                likes=[],
            )
            await repo.add(post)
            logger.info("Post %s created by user %s", post.id, claim.subject)
            return PostResponse.model_validate(post)

        except InkwellError:
            raise
        except Exception as e:
            logger.error("Database error creating post for %s: %s", claim.subject, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the post. Please try again.",
                context={"user_id": claim.subject, "error_type": type(e).__name__},
            )

    async def list_posts(self, db: AsyncSession) -> List[PostResponse]:
        """All posts, newest first, authors resolved to {id, username}."""
        try:
            posts = await PostRepository(db).list_recent()
            return [PostResponse.model_validate(post) for post in posts]
        except Exception as e:
            logger.error("Database error listing posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve posts. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_post(self, db: AsyncSession, raw_id: str) -> PostResponse:
        """
        Raises:
            NotFoundError: unknown or malformed id (→ 404)
            DatabaseError: query failed (→ 500)
        """
        post = await self._load(db, raw_id)
        return PostResponse.model_validate(post)

    async def update_post(
        self, db: AsyncSession, claim: Claim, raw_id: str, payload: Optional[PostUpdate]
    ) -> PostResponse:
        """
        Apply the provided fields to a post the caller owns.

        A falsy field (omitted, null, "") keeps the stored value; there is
        no way to clear `image` through this path.

        Raises:
            NotFoundError: unknown or malformed id
            NotAuthorizedError: caller is not the author
            DatabaseError: the write failed
        """
        post = await self._load(db, raw_id)
        self._ensure_author(post, claim, action="update")

        payload = payload or PostUpdate()
        post.title = payload.title or post.title
        post.content = payload.content or post.content
        post.image = payload.image or post.image

        try:
            await PostRepository(db).save(post)
        except Exception as e:
            logger.error("Database error updating post %s: %s", post.id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the post. Please try again.",
                context={"post_id": str(post.id), "error_type": type(e).__name__},
            )

        logger.info("Post %s updated by user %s", post.id, claim.subject)
        return PostResponse.model_validate(post)

    async def delete_post(self, db: AsyncSession, claim: Claim, raw_id: str) -> MessageResponse:
        """
        Permanently remove a post the caller owns.

        Raises:
            NotFoundError: unknown or malformed id
            NotAuthorizedError: caller is not the author
            DatabaseError: the delete failed
        """
        logger.info("Delete requested for post %s by user %s", raw_id, claim.subject)
        post = await self._load(db, raw_id)
        self._ensure_author(post, claim, action="delete")

        try:
            await PostRepository(db).delete(post)
        except Exception as e:
            logger.error("Database error deleting post %s: %s", post.id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the post. Please try again.",
                context={"post_id": str(post.id), "error_type": type(e).__name__},
            )

        logger.info("Post %s deleted", post.id)
        return MessageResponse(message="Post removed")

    async def toggle_like(self, db: AsyncSession, claim: Claim, raw_id: str) -> List[str]:
        """
        Flip the caller's membership in the post's like list.

        Two identical calls in a row return the list to where it started.

        Returns:
            The resulting like list, newest like first
        """
        post = await self._load(db, raw_id)
        post.likes = toggle_membership(list(post.likes or []), claim.subject)

        try:
            await PostRepository(db).save(post)
        except Exception as e:
            logger.error("Database error toggling like on %s: %s", post.id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update likes. Please try again.",
                context={"post_id": str(post.id), "error_type": type(e).__name__},
            )

        liked = claim.subject in post.likes
        logger.info("User %s %s post %s", claim.subject, "liked" if liked else "unliked", post.id)
        return list(post.likes)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(self, db: AsyncSession, raw_id: str) -> Post:
        """Parse the id and fetch the post, or raise NotFoundError."""
        post_id = parse_post_id(raw_id)
        try:
            post = await PostRepository(db).get(post_id)
        except Exception as e:
            logger.error("Database error fetching post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the post. Please try again.",
                context={"post_id": str(post_id), "error_type": type(e).__name__},
            )

        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id))
        return post

    @staticmethod
    def _ensure_author(post: Post, claim: Claim, action: str) -> None:
        if post.author_id != claim.user_id:
            logger.warning(
                "User %s not authorized to %s post %s (author %s)",
                claim.subject, action, post.id, post.author_id,
            )
            raise NotAuthorizedError(
                context={"post_id": str(post.id), "user_id": claim.subject, "action": action}
            )


# ── Singleton Instance ────────────────────────────────────────────────────
# Stateless; the session is passed per call
post_service = PostService()

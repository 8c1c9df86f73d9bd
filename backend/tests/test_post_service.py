"""
Inkwell Backend: Post Service Unit Tests
=========================================

What:  Ownership rules, like toggling, ordering and error translation in
       PostService.
How:   Most tests run against a real SQLite session (db_session); the
       store-failure tests use the AsyncMock session instead.

What we test:
    ✅ Created posts are authored by the caller
    ✅ Non-authors cannot update or delete, and the post is left unchanged
    ✅ Falsy update fields keep the stored value
    ✅ Like toggle alternates and prepends
    ✅ Listing is newest first
    ✅ Malformed ids are NotFound without touching the store
    ✅ Store failures surface as DatabaseError
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from inkwell.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotAuthorizedError,
    NotFoundError,
)
from inkwell.models.post import Post
from inkwell.schemas.post import PostCreate, PostUpdate
from inkwell.security import Claim
from inkwell.services.post_service import PostService, parse_post_id, toggle_membership


class TestToggleMembership:
    """The pure list operation behind the like endpoint."""

    def test_absent_user_is_prepended(self):
        assert toggle_membership(["b", "c"], "a") == ["a", "b", "c"]

    def test_present_user_is_removed_preserving_order(self):
        assert toggle_membership(["c", "a", "b"], "a") == ["c", "b"]

    def test_input_list_is_not_mutated(self):
        likes = ["b"]
        toggle_membership(likes, "a")
        assert likes == ["b"]


class TestParsePostId:

    def test_valid_uuid(self):
        post_id = uuid.uuid4()
        assert parse_post_id(str(post_id)) == post_id

    @pytest.mark.parametrize("raw", ["not-a-uuid", "123", "", "5f8d0d55b54764421b7156c9"])
    def test_malformed_id_is_not_found(self, raw):
        with pytest.raises(NotFoundError):
            parse_post_id(raw)


class TestPostServiceCreate:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_author_is_caller(self, db_session, users, claims):
        result = await self.service.create_post(
            db_session, claims["alice"], PostCreate(title="A", content="B")
        )

        assert result.title == "A"
        assert result.content == "B"
        assert result.image is None
        assert result.likes == []
        assert result.author.id == users["alice"].id
        assert result.author.username == "alice"

    @pytest.mark.asyncio
    async def test_unknown_user_rejected(self, db_session, users):
        ghost = Claim(user_id=uuid.uuid4())
        with pytest.raises(AuthenticationError):
            await self.service.create_post(db_session, ghost, PostCreate(title="A", content="B"))


class TestPostServiceOwnership:

    def setup_method(self):
        self.service = PostService()

    async def _create(self, db_session, claim, **fields):
        payload = PostCreate(**{"title": "Original", "content": "Body", "image": "a.png", **fields})
        return await self.service.create_post(db_session, claim, payload)

    @pytest.mark.asyncio
    async def test_non_author_cannot_update(self, db_session, claims):
        post = await self._create(db_session, claims["alice"])

        with pytest.raises(NotAuthorizedError):
            await self.service.update_post(
                db_session, claims["bob"], str(post.id), PostUpdate(title="Hijacked")
            )

        unchanged = await self.service.get_post(db_session, str(post.id))
        assert unchanged.title == "Original"
        assert unchanged.author.id == post.author.id

    @pytest.mark.asyncio
    async def test_non_author_cannot_delete(self, db_session, claims):
        post = await self._create(db_session, claims["alice"])

        with pytest.raises(NotAuthorizedError):
            await self.service.delete_post(db_session, claims["bob"], str(post.id))

        still_there = await self.service.get_post(db_session, str(post.id))
        assert still_there.id == post.id

    @pytest.mark.asyncio
    async def test_author_updates_only_provided_fields(self, db_session, claims):
        post = await self._create(db_session, claims["alice"])

        result = await self.service.update_post(
            db_session, claims["alice"], str(post.id), PostUpdate(content="New body")
        )

        assert result.title == "Original"
        assert result.content == "New body"
        assert result.image == "a.png"

    @pytest.mark.asyncio
    async def test_falsy_fields_keep_stored_value(self, db_session, claims):
        post = await self._create(db_session, claims["alice"])

        result = await self.service.update_post(
            db_session, claims["alice"], str(post.id), PostUpdate(title="", image="")
        )

        assert result.title == "Original"
        assert result.image == "a.png"

    @pytest.mark.asyncio
    async def test_update_without_body_is_a_no_op(self, db_session, claims):
        post = await self._create(db_session, claims["alice"])
        result = await self.service.update_post(db_session, claims["alice"], str(post.id), None)
        assert result.title == "Original"

    @pytest.mark.asyncio
    async def test_author_deletes(self, db_session, claims):
        post = await self._create(db_session, claims["alice"])

        result = await self.service.delete_post(db_session, claims["alice"], str(post.id))

        assert result.message == "Post removed"
        with pytest.raises(NotFoundError):
            await self.service.get_post(db_session, str(post.id))

    @pytest.mark.asyncio
    async def test_missing_post_is_not_found(self, db_session, claims):
        missing = str(uuid.uuid4())
        with pytest.raises(NotFoundError):
            await self.service.update_post(db_session, claims["alice"], missing, PostUpdate(title="x"))
        with pytest.raises(NotFoundError):
            await self.service.delete_post(db_session, claims["alice"], missing)
        with pytest.raises(NotFoundError):
            await self.service.toggle_like(db_session, claims["alice"], missing)


class TestPostServiceLikes:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_toggle_alternates(self, db_session, claims):
        post = await self.service.create_post(
            db_session, claims["alice"], PostCreate(title="A", content="B")
        )
        bob = claims["bob"]

        first = await self.service.toggle_like(db_session, bob, str(post.id))
        second = await self.service.toggle_like(db_session, bob, str(post.id))

        assert first == [bob.subject]
        assert second == []

    @pytest.mark.asyncio
    async def test_new_likes_are_prepended(self, db_session, claims):
        post = await self.service.create_post(
            db_session, claims["alice"], PostCreate(title="A", content="B")
        )
        alice, bob = claims["alice"], claims["bob"]

        await self.service.toggle_like(db_session, alice, str(post.id))
        likes = await self.service.toggle_like(db_session, bob, str(post.id))
        assert likes == [bob.subject, alice.subject]

        likes = await self.service.toggle_like(db_session, alice, str(post.id))
        assert likes == [bob.subject]

        stored = await self.service.get_post(db_session, str(post.id))
        assert stored.likes == [bob.subject]


class TestPostServiceList:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_empty(self, db_session):
        assert await self.service.list_posts(db_session) == []

    @pytest.mark.asyncio
    async def test_newest_first(self, db_session, users):
        base = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        # Inserted out of order on purpose
        for offset, title in [(1, "middle"), (0, "oldest"), (2, "newest")]:
            db_session.add(Post(
                title=title,
                content="...",
                author_id=users["bob"].id,
                likes=[],
                created_at=base + timedelta(hours=offset),
                updated_at=base + timedelta(hours=offset),
            ))
        await db_session.flush()

        result = await self.service.list_posts(db_session)

        assert [p.title for p in result] == ["newest", "middle", "oldest"]
        assert all(p.author.username == "bob" for p in result)


class TestPostServiceStoreFailures:
    """Unexpected store errors become DatabaseError; our own errors pass through."""

    def setup_method(self):
        self.service = PostService()
        self.claim = Claim(user_id=uuid.uuid4())

    @pytest.mark.asyncio
    async def test_list_failure_wrapped(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("connection reset")

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.list_posts(mock_db_session)

        assert "connection reset" not in exc_info.value.message
        assert exc_info.value.context["error_type"] == "RuntimeError"

    @pytest.mark.asyncio
    async def test_get_failure_wrapped(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("connection reset")

        with pytest.raises(DatabaseError):
            await self.service.get_post(mock_db_session, str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_malformed_id_never_reaches_store(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await self.service.toggle_like(mock_db_session, self.claim, "not-a-uuid")

        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_failure_wrapped(self, mock_db_session):
        mock_db_session.get.side_effect = RuntimeError("pool exhausted")

        with pytest.raises(DatabaseError):
            await self.service.create_post(
                mock_db_session, self.claim, PostCreate(title="A", content="B")
            )

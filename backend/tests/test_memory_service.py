"""
Spacetime Backend: Memory Service Unit Tests
=============================================

What:  Ownership, visibility and excerpt rules of MemoryService.
How:   Mock DB sessions; no database needed.
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import DatabaseError, NotFoundError, NotOwnerError
from app.schemas.memory import MemoryWrite
from app.services.memory_service import MemoryService, excerpt


def _memory(**overrides):
    data = {
        "id": uuid4(),
        "content": "A short memory",
        "cover_url": "http://test/uploads/a.png",
        "is_public": False,
        "user_id": uuid4(),
        "created_at": datetime.now(timezone.utc),
    }
    data.update(overrides)
    return SimpleNamespace(**data)


def _returning_one(session, memory):
    result = MagicMock()
    result.scalar_one_or_none.return_value = memory
    session.execute.return_value = result


class TestExcerpt:

    def test_long_content_cut_to_120_plus_ellipsis(self):
        text = "x" * 300
        assert excerpt(text) == "x" * 120 + "..."

    def test_short_content_still_gets_ellipsis(self):
        assert excerpt("hello") == "hello..."

    def test_exactly_120(self):
        assert excerpt("y" * 120) == "y" * 120 + "..."


class TestListMemories:

    def setup_method(self):
        self.service = MemoryService()

    @pytest.mark.asyncio
    async def test_list_excerpts_each_item(self, mock_db_session):
        owner = uuid4()
        memories = [
            _memory(user_id=owner, content="a" * 200),
            _memory(user_id=owner, content="short"),
        ]
        result = MagicMock()
        result.scalars.return_value.all.return_value = memories
        mock_db_session.execute.return_value = result

        items = await self.service.list_memories(mock_db_session, owner)

        assert [item.content for item in items] == ["a" * 120 + "...", "short..."]
        assert all(item.user_id == owner for item in items)
        # Source objects keep their full content
        assert memories[0].content == "a" * 200

    @pytest.mark.asyncio
    async def test_list_empty(self, mock_db_session):
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = result

        assert await self.service.list_memories(mock_db_session, uuid4()) == []

    @pytest.mark.asyncio
    async def test_list_wraps_database_errors(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError):
            await self.service.list_memories(mock_db_session, uuid4())


class TestGetMemory:

    def setup_method(self):
        self.service = MemoryService()

    @pytest.mark.asyncio
    async def test_owner_reads_private(self, mock_db_session):
        memory = _memory(content="c" * 500)
        _returning_one(mock_db_session, memory)

        result = await self.service.get_memory(mock_db_session, memory.id, memory.user_id)

        assert result.id == memory.id
        assert result.content == "c" * 500

    @pytest.mark.asyncio
    async def test_non_owner_denied_private(self, mock_db_session):
        memory = _memory(is_public=False)
        _returning_one(mock_db_session, memory)

        with pytest.raises(NotOwnerError):
            await self.service.get_memory(mock_db_session, memory.id, uuid4())

    @pytest.mark.asyncio
    async def test_non_owner_reads_public_in_full(self, mock_db_session):
        memory = _memory(is_public=True, content="p" * 300)
        _returning_one(mock_db_session, memory)

        result = await self.service.get_memory(mock_db_session, memory.id, uuid4())

        assert result.content == "p" * 300
        assert result.is_public is True

    @pytest.mark.asyncio
    async def test_missing_memory(self, mock_db_session):
        _returning_one(mock_db_session, None)

        with pytest.raises(NotFoundError):
            await self.service.get_memory(mock_db_session, uuid4(), uuid4())


class TestCreateMemory:

    @pytest.mark.asyncio
    async def test_create_sets_owner_and_defaults_private(self, mock_db_session):
        owner = uuid4()

        async def assign_defaults():
            added = mock_db_session.add.call_args[0][0]
            added.id = uuid4()
            added.created_at = datetime.now(timezone.utc)
            added.is_public = bool(added.is_public)

        mock_db_session.flush = AsyncMock(side_effect=assign_defaults)
        payload = MemoryWrite.model_validate({"content": "hi", "coverUrl": "http://x/c.png"})

        result = await MemoryService().create_memory(mock_db_session, owner, payload)

        assert result.user_id == owner
        assert result.is_public is False
        assert result.content == "hi"
        assert result.cover_url == "http://x/c.png"
        mock_db_session.add.assert_called_once()


class TestUpdateMemory:

    def setup_method(self):
        self.service = MemoryService()
        self.payload = MemoryWrite(content="new", cover_url="http://x/new.png", is_public=True)

    @pytest.mark.asyncio
    async def test_owner_replaces_fields(self, mock_db_session):
        memory = _memory()
        _returning_one(mock_db_session, memory)

        result = await self.service.update_memory(
            mock_db_session, memory.id, memory.user_id, self.payload
        )

        assert (result.content, result.cover_url, result.is_public) == (
            "new", "http://x/new.png", True
        )
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_owner_leaves_record_untouched(self, mock_db_session):
        memory = _memory(content="original", is_public=True)
        _returning_one(mock_db_session, memory)

        with pytest.raises(NotOwnerError):
            await self.service.update_memory(mock_db_session, memory.id, uuid4(), self.payload)

        assert memory.content == "original"
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_memory(self, mock_db_session):
        _returning_one(mock_db_session, None)

        with pytest.raises(NotFoundError):
            await self.service.update_memory(mock_db_session, uuid4(), uuid4(), self.payload)


class TestDeleteMemory:

    def setup_method(self):
        self.service = MemoryService()

    @pytest.mark.asyncio
    async def test_owner_deletes(self, mock_db_session):
        memory = _memory()
        _returning_one(mock_db_session, memory)

        await self.service.delete_memory(mock_db_session, memory.id, memory.user_id)

        mock_db_session.delete.assert_awaited_once_with(memory)

    @pytest.mark.asyncio
    async def test_non_owner_cannot_delete(self, mock_db_session):
        memory = _memory(is_public=True)
        _returning_one(mock_db_session, memory)

        with pytest.raises(NotOwnerError):
            await self.service.delete_memory(mock_db_session, memory.id, uuid4())

        mock_db_session.delete.assert_not_awaited()


class TestMemoryWriteIsPublic:

    @pytest.mark.parametrize("raw, expected", [
        (None, False),
        (False, False),
        (True, True),
        ("", False),
        ("on", True),
        ("false", True),
        (0, False),
        (2, True),
        (float("nan"), False),
        ([], True),
    ])
    def test_truthiness(self, raw, expected):
        payload = MemoryWrite.model_validate(
            {"content": "c", "coverUrl": "http://x/c.png", "isPublic": raw}
        )
        assert payload.is_public is expected

    def test_omitted_defaults_to_private(self):
        payload = MemoryWrite.model_validate({"content": "c", "coverUrl": "http://x/c.png"})
        assert payload.is_public is False

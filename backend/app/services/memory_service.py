"""
Spacetime Backend: Memory Service
==================================

What:  Business rules for memories: ownership, visibility, list excerpts.
How:   Each operation runs one query or write on the request's session and
       returns MemoryResponse models; the route layer only maps HTTP.
Who:   Called by the /memories route handlers.

Access Rules:
    ┌──────────────┬───────────────┬────────────────────────────┐
    │ Operation    │ Owner         │ Anyone else                │
    ├──────────────┼───────────────┼────────────────────────────┤
    │ list         │ own rows only │ n/a (filtered by user_id)  │
    │ get          │ full record   │ full record if is_public,  │
    │              │               │ NotOwnerError otherwise    │
    │ update       │ replace       │ NotOwnerError, row intact  │
    │ delete       │ remove        │ NotOwnerError, row intact  │
    └──────────────┴───────────────┴────────────────────────────┘

Transactions:
    The service only flushes; `get_db_session` commits after the handler
    returns, or rolls back if anything raised.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import asc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError, NotOwnerError
from app.models.memory import Memory
from app.schemas.memory import MemoryResponse, MemoryWrite

logger = logging.getLogger(__name__)

# Length of the content excerpt returned by the list endpoint
EXCERPT_LENGTH = 120
EXCERPT_SUFFIX = "..."


def excerpt(content: str) -> str:
    """First EXCERPT_LENGTH characters followed by the ellipsis, always appended."""
    return content[:EXCERPT_LENGTH] + EXCERPT_SUFFIX


class MemoryService:
    """
    Stateless service for memory CRUD.

    Error Handling Strategy:
        NotFoundError and NotOwnerError propagate unchanged. SQLAlchemy errors
        are logged and wrapped in DatabaseError so SQL details never reach
        the client.
    """

    async def _load(self, db: AsyncSession, memory_id: UUID) -> Memory:
        """Fetch a memory by primary key or raise NotFoundError."""
        result = await db.execute(select(Memory).where(Memory.id == memory_id))
        memory = result.scalar_one_or_none()
        if memory is None:
            raise NotFoundError(resource="memory", resource_id=str(memory_id))
        return memory

    async def list_memories(self, db: AsyncSession, user_id: UUID) -> List[MemoryResponse]:
        """
        List the caller's memories, oldest first, with excerpted content.

        Query plan:
            SELECT * FROM memories WHERE user_id = :uid ORDER BY created_at ASC
            → idx_memories_user_created
        """
        try:
            result = await db.execute(
                select(Memory)
                .where(Memory.user_id == user_id)
                .order_by(asc(Memory.created_at))
            )
            memories = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing memories for %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve memories. Please try again.",
                context={"error_type": type(e).__name__},
            )

        items = []
        for memory in memories:
            item = MemoryResponse.model_validate(memory)
            item.content = excerpt(memory.content)
            items.append(item)
        return items

    async def get_memory(self, db: AsyncSession, memory_id: UUID, user_id: UUID) -> MemoryResponse:
        """
        Return one memory, full content.

        Raises:
            NotFoundError: no memory with this id (→ 500)
            NotOwnerError: memory is private and belongs to someone else (→ 401)
        """
        try:
            memory = await self._load(db, memory_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching memory %s: %s", memory_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the memory. Please try again.",
                context={"memory_id": str(memory_id)},
            )

        if not memory.is_public and memory.user_id != user_id:
            logger.info("User %s denied read of private memory %s", user_id, memory_id)
            raise NotOwnerError(memory_id=str(memory_id), user_id=str(user_id))

        return MemoryResponse.model_validate(memory)

    async def create_memory(
        self, db: AsyncSession, user_id: UUID, payload: MemoryWrite
    ) -> MemoryResponse:
        """Insert a memory owned by the caller and return it."""
        memory = Memory(
            content=payload.content,
            cover_url=payload.cover_url,
            is_public=payload.is_public,
            user_id=user_id,
        )
        try:
            db.add(memory)
            await db.flush()  # Assigns defaults without committing
        except SQLAlchemyError as e:
            logger.error("Database error creating memory: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the memory. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Memory %s created by %s (public=%s)", memory.id, user_id, memory.is_public)
        return MemoryResponse.model_validate(memory)

    async def update_memory(
        self, db: AsyncSession, memory_id: UUID, user_id: UUID, payload: MemoryWrite
    ) -> MemoryResponse:
        """
        Replace content, cover and visibility of an owned memory.

        Raises:
            NotFoundError: no memory with this id (→ 500)
            NotOwnerError: memory belongs to someone else; nothing is written (→ 401)
        """
        try:
            memory = await self._load(db, memory_id)
            if memory.user_id != user_id:
                logger.info("User %s denied update of memory %s", user_id, memory_id)
                raise NotOwnerError(memory_id=str(memory_id), user_id=str(user_id))

            memory.content = payload.content
            memory.cover_url = payload.cover_url
            memory.is_public = payload.is_public
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating memory %s: %s", memory_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the memory. Please try again.",
                context={"memory_id": str(memory_id)},
            )

        logger.info("Memory %s updated", memory_id)
        return MemoryResponse.model_validate(memory)

    async def delete_memory(self, db: AsyncSession, memory_id: UUID, user_id: UUID) -> None:
        """
        Remove an owned memory.

        Raises:
            NotFoundError: no memory with this id (→ 500)
            NotOwnerError: memory belongs to someone else; nothing is deleted (→ 401)
        """
        try:
            memory = await self._load(db, memory_id)
            if memory.user_id != user_id:
                logger.info("User %s denied delete of memory %s", user_id, memory_id)
                raise NotOwnerError(memory_id=str(memory_id), user_id=str(user_id))

            await db.delete(memory)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting memory %s: %s", memory_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the memory. Please try again.",
                context={"memory_id": str(memory_id)},
            )

        logger.info("Memory %s deleted", memory_id)


# ── Singleton Instance ────────────────────────────────────────────────────
memory_service = MemoryService()

"""
Spacetime Backend: Memory SQLAlchemy Model
===========================================

What:  ORM model representing the `memories` table.
Who:   Used by MemoryService for CRUD operations and by Alembic for schema management.

Table Design:
    - UUID primary key: non-sequential, safe to expose in URLs
    - content: full text (truncation for the list view happens in the service)
    - cover_url: absolute URL returned by POST /upload
    - is_public: visibility to non-owners through GET /memories/{id}
    - user_id: owning user, cascade-deleted with the user
    - created_at: UTC with timezone

    Index on (user_id, created_at):
        Serves the only list query, "my memories, oldest first".
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, Uuid, false, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Memory(Base):
    """
    A user-owned content record with an optional public visibility flag.

    Lifecycle:
        1. Created by POST /memories; owner is the JWT `sub` of the caller
        2. Content, cover and visibility replaced by PUT (owner only)
        3. Removed by DELETE (owner only)

    Query Patterns:
        - Owner listing: WHERE user_id = :uid ORDER BY created_at ASC
          → idx_memories_user_created
        - Single read: WHERE id = :uuid → primary key
    """

    __tablename__ = "memories"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Memory text, stored untruncated",
    )

    cover_url: Mapped[str] = mapped_column(
        String(2048),
        nullable=False,
        comment="URL of the uploaded cover image or video",
    )

    is_public: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        comment="Readable by other users through the single-item endpoint",
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning user",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this memory was created (UTC)",
    )

    user = relationship("User", back_populates="memories")

    __table_args__ = (
        Index("idx_memories_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Memory(id={self.id}, user_id={self.user_id}, "
            f"is_public={self.is_public})>"
        )

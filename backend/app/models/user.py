"""
Spacetime Backend: User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table, one row per GitHub account.
Who:   Written by AuthService on sign-in; referenced by Memory.user_id.

Only `id` leaves this table in practice: it becomes the JWT `sub` claim.
"""

import uuid

from sqlalchemy import BigInteger, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class User(Base):
    """A person who signed in with GitHub."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # GitHub user ids exceed 32 bits for newer accounts
    github_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        unique=True,
        comment="Numeric GitHub account id",
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    login: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar_url: Mapped[str] = mapped_column(String(2048), nullable=False)

    memories = relationship(
        "Memory",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, login='{self.login}')>"

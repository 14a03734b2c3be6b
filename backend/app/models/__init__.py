"""ORM models. Importing this package registers every table on Base.metadata."""

from app.models.memory import Memory
from app.models.user import User

__all__ = ["Memory", "User"]

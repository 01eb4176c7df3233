"""SQLAlchemy ORM models."""

from querypad.models.base import Base
from querypad.models.query import Query, QueryTag
from querypad.models.user import User

__all__ = ["Base", "Query", "QueryTag", "User"]

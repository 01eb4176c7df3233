"""ORM models for saved queries and their tags."""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    false,
)
from sqlalchemy.orm import relationship

from querypad.models.base import Base
from querypad.services.tags import TAG_MAX_LEN


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Query(Base):
    """
    A user's saved query.

    share_id is unique when set and is only set together with is_public=True.
    """

    __tablename__ = "queries"
    __table_args__ = (Index("ix_queries_user_id_created_at", "user_id", "created_at"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(Text, nullable=False)
    text = Column(Text, nullable=False)
    is_public = Column(Boolean, nullable=False, default=False, server_default=false())
    share_id = Column(String(64), nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    tags = relationship(
        "QueryTag",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="QueryTag.tag",
    )


class QueryTag(Base):
    """One normalized tag on a query; (query_id, tag) is the primary key."""

    __tablename__ = "query_tags"

    query_id = Column(
        Integer,
        ForeignKey("queries.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag = Column(String(TAG_MAX_LEN), primary_key=True)

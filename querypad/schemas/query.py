"""Schemas for query records, request bodies and the public share view."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class QueryRecord(BaseModel):
    """A stored query as returned by every QueryStore adapter."""

    id: str
    owner_id: str
    title: str
    text: str
    tags: list[str] = Field(default_factory=list)
    is_public: bool = False
    share_id: str | None = None
    created_at: datetime


class PublicQueryView(BaseModel):
    """Read-only view of a shared query. Carries no owner or identifier fields."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    text: str
    tags: list[str]
    created_at: datetime


class QueryWrite(BaseModel):
    """
    Body for POST /queries and PUT /queries/{id}.

    Only title, text and tags are read; any other field in the body is ignored.
    """

    title: str | None = None
    text: str | None = None
    tags: list[str] | None = None


class QueryOut(BaseModel):
    """Query as returned to its owner."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    text: str
    tags: list[str]
    is_public: bool
    share_id: str | None = None
    created_at: datetime

    @classmethod
    def from_record(cls, record: QueryRecord) -> "QueryOut":
        return cls(
            id=record.id,
            title=record.title,
            text=record.text,
            tags=record.tags,
            is_public=record.is_public,
            share_id=record.share_id,
            created_at=record.created_at,
        )


class ShareResponse(BaseModel):
    """Share id for a query made public."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    share_id: str

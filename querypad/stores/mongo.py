"""Document adapter: users and queries collections in MongoDB, tags embedded on each query."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from querypad.core.errors import (
    QueryNotFoundError,
    ShareIdCollisionError,
    StoreUnavailableError,
    UsernameTakenError,
)
from querypad.schemas.query import QueryRecord
from querypad.schemas.user import UserRecord
from querypad.services.sharing import DEFAULT_SHARE_ID_BYTES
from querypad.stores.base import QueryStore, StorageBackend, UserStore

logger = logging.getLogger(__name__)


@contextmanager
def _driver_errors() -> Iterator[None]:
    """Driver faults surface as StoreUnavailableError; duplicate keys are left to the caller."""
    try:
        yield
    except DuplicateKeyError:
        raise
    except PyMongoError as e:
        raise StoreUnavailableError("MongoDB operation failed", cause=e) from e


def _object_id(value: str) -> ObjectId | None:
    return ObjectId(value) if ObjectId.is_valid(value) else None


def _as_utc(value: datetime) -> datetime:
    # pymongo returns naive UTC datetimes unless the client is tz_aware.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _to_record(doc: dict[str, Any]) -> QueryRecord:
    return QueryRecord(
        id=str(doc["_id"]),
        owner_id=doc["user_id"],
        title=doc["title"],
        text=doc["text"],
        tags=list(doc.get("tags") or []),
        is_public=bool(doc.get("is_public", False)),
        share_id=doc.get("share_id"),
        created_at=_as_utc(doc["created_at"]),
    )


class MongoUserStore(UserStore):
    """users collection; a unique index on username rejects duplicates."""

    def __init__(self, db: Database) -> None:
        self._users = db["users"]

    def ensure_indexes(self) -> None:
        with _driver_errors():
            self._users.create_index([("username", ASCENDING)], unique=True)

    def create(self, username: str, password_hash: str) -> UserRecord:
        doc = {"username": username, "password_hash": password_hash}
        try:
            with _driver_errors():
                result = self._users.insert_one(doc)
        except DuplicateKeyError as e:
            raise UsernameTakenError(username) from e
        return UserRecord(
            id=str(result.inserted_id), username=username, password_hash=password_hash
        )

    def find_by_username(self, username: str) -> UserRecord | None:
        with _driver_errors():
            doc = self._users.find_one({"username": username})
        if doc is None:
            return None
        return UserRecord(
            id=str(doc["_id"]),
            username=doc["username"],
            password_hash=doc["password_hash"],
        )


class MongoQueryStore(QueryStore):
    """
    queries collection. Each mutation is a single-document write, so the record and its
    tags always change together. share_id is absent (not null) until the query is shared,
    which keeps the sparse unique index valid for private queries.
    """

    def __init__(self, db: Database, share_id_bytes: int = DEFAULT_SHARE_ID_BYTES) -> None:
        super().__init__(share_id_bytes=share_id_bytes)
        self._queries = db["queries"]

    def ensure_indexes(self) -> None:
        with _driver_errors():
            self._queries.create_index(
                [("user_id", ASCENDING), ("created_at", DESCENDING)]
            )
            self._queries.create_index(
                [("share_id", ASCENDING)], unique=True, sparse=True
            )

    def _owned_filter(self, owner_id: str, query_id: str) -> dict[str, Any]:
        oid = _object_id(query_id)
        if oid is None:
            raise QueryNotFoundError()
        return {"_id": oid, "user_id": owner_id}

    def _insert(self, owner_id: str, title: str, text: str, tags: list[str]) -> QueryRecord:
        doc = {
            "user_id": owner_id,
            "title": title,
            "text": text,
            "tags": tags,
            "is_public": False,
            "created_at": datetime.now(timezone.utc),
        }
        with _driver_errors():
            result = self._queries.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _to_record(doc)

    def _list_by_owner(self, owner_id: str) -> list[QueryRecord]:
        with _driver_errors():
            cursor = self._queries.find({"user_id": owner_id}).sort(
                [("created_at", DESCENDING), ("_id", DESCENDING)]
            )
            return [_to_record(doc) for doc in cursor]

    def _distinct_tags(self, owner_id: str) -> list[str]:
        with _driver_errors():
            return list(self._queries.distinct("tags", {"user_id": owner_id}))

    def _update(
        self, owner_id: str, query_id: str, title: str, text: str, tags: list[str]
    ) -> QueryRecord:
        with _driver_errors():
            doc = self._queries.find_one_and_update(
                self._owned_filter(owner_id, query_id),
                {"$set": {"title": title, "text": text, "tags": tags}},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            raise QueryNotFoundError()
        return _to_record(doc)

    def _delete(self, owner_id: str, query_id: str) -> None:
        with _driver_errors():
            result = self._queries.delete_one(self._owned_filter(owner_id, query_id))
        if result.deleted_count == 0:
            raise QueryNotFoundError()

    def _share(self, owner_id: str, query_id: str, mint: Callable[[], str]) -> str:
        owned = self._owned_filter(owner_id, query_id)
        with _driver_errors():
            doc = self._queries.find_one(owned)
        if doc is None:
            raise QueryNotFoundError()
        if doc.get("is_public") and doc.get("share_id"):
            return doc["share_id"]

        share_id = mint()
        try:
            with _driver_errors():
                updated = self._queries.find_one_and_update(
                    {**owned, "is_public": False},
                    {"$set": {"is_public": True, "share_id": share_id}},
                    return_document=ReturnDocument.AFTER,
                )
        except DuplicateKeyError as e:
            raise ShareIdCollisionError("Share id already in use", cause=e) from e
        if updated is not None:
            logger.info("Query shared", extra={"query_id": query_id})
            return share_id

        # Another request made it public between our read and the conditional update.
        with _driver_errors():
            doc = self._queries.find_one(owned)
        if doc is None:
            raise QueryNotFoundError()
        return doc["share_id"]

    def _find_public(self, share_id: str) -> QueryRecord | None:
        with _driver_errors():
            doc = self._queries.find_one({"share_id": share_id, "is_public": True})
        return _to_record(doc) if doc is not None else None


class MongoBackend(StorageBackend):
    """One MongoClient held for the life of the service; indexes ensured on construction."""

    name = "mongo"

    def __init__(
        self,
        client: MongoClient,
        db_name: str,
        share_id_bytes: int = DEFAULT_SHARE_ID_BYTES,
    ) -> None:
        self.client = client
        db = client[db_name]
        users = MongoUserStore(db)
        queries = MongoQueryStore(db, share_id_bytes=share_id_bytes)
        users.ensure_indexes()
        queries.ensure_indexes()
        self.users = users
        self.queries = queries

    def ping(self) -> bool:
        try:
            self.client.admin.command("ping")
            return True
        except PyMongoError:
            logger.warning("MongoDB ping failed", exc_info=True)
            return False

    def close(self) -> None:
        self.client.close()

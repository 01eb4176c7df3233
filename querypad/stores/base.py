"""
Storage-agnostic store contracts.

QueryStore owns validation, tag normalization and the share id retry loop; adapters
only implement the storage primitives (the underscore methods). Every owner-scoped
primitive filters on owner_id itself and raises QueryNotFoundError for both missing
and foreign records.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from querypad.core.errors import (
    QueryValidationError,
    ShareIdCollisionError,
    StoreUnavailableError,
)
from querypad.schemas.query import PublicQueryView, QueryRecord
from querypad.schemas.user import UserRecord
from querypad.services.sharing import (
    DEFAULT_SHARE_ID_BYTES,
    MAX_SHARE_ID_ATTEMPTS,
    new_share_id,
)
from querypad.services.tags import TAG_MAX_LEN, normalize_tags

logger = logging.getLogger(__name__)


class UserStore(ABC):
    """Username -> password hash records with a storage-level unique username."""

    @abstractmethod
    def create(self, username: str, password_hash: str) -> UserRecord:
        """Insert a user. Raises UsernameTakenError on duplicate username."""

    @abstractmethod
    def find_by_username(self, username: str) -> UserRecord | None:
        """Return the user with this exact (case-sensitive) username, if any."""


def _validate_fields(title: str | None, text: str | None) -> tuple[str, str]:
    if not title or not title.strip() or not text or not text.strip():
        raise QueryValidationError("Title and text are required.")
    return title, text


def _validate_tags(tags: list[str] | None) -> list[str]:
    normalized = normalize_tags(tags)
    if any(len(tag) > TAG_MAX_LEN for tag in normalized):
        raise QueryValidationError(f"Tags must be at most {TAG_MAX_LEN} characters.")
    return normalized


class QueryStore(ABC):
    """Owner-scoped query records plus public lookup by share id."""

    def __init__(self, share_id_bytes: int = DEFAULT_SHARE_ID_BYTES) -> None:
        self.share_id_bytes = share_id_bytes

    def create(
        self,
        owner_id: str,
        title: str | None,
        text: str | None,
        tags: list[str] | None = None,
    ) -> QueryRecord:
        title, text = _validate_fields(title, text)
        return self._insert(owner_id, title, text, _validate_tags(tags))

    def list_by_owner(self, owner_id: str) -> list[QueryRecord]:
        """Owner's queries, newest first."""
        return self._list_by_owner(owner_id)

    def list_tags(self, owner_id: str) -> list[str]:
        """Distinct tags across the owner's queries, sorted ascending."""
        return sorted(set(self._distinct_tags(owner_id)))

    def update(
        self,
        owner_id: str,
        query_id: str,
        title: str | None,
        text: str | None,
        tags: list[str] | None = None,
    ) -> QueryRecord:
        """Replace title, text and tags. Owner, created_at and share state are never touched."""
        title, text = _validate_fields(title, text)
        return self._update(owner_id, query_id, title, text, _validate_tags(tags))

    def delete(self, owner_id: str, query_id: str) -> None:
        self._delete(owner_id, query_id)

    def share(self, owner_id: str, query_id: str) -> str:
        """
        Make the query public and return its share id.

        Idempotent: an already public query returns its existing id without a write.
        A collision on a freshly minted id is retried with a new one.
        """
        def mint() -> str:
            return new_share_id(self.share_id_bytes)

        for attempt in range(1, MAX_SHARE_ID_ATTEMPTS + 1):
            try:
                return self._share(owner_id, query_id, mint)
            except ShareIdCollisionError:
                logger.warning(
                    "Share id collision; retrying",
                    extra={"query_id": query_id, "attempt": attempt},
                )
        raise StoreUnavailableError(
            f"Could not allocate a unique share id after {MAX_SHARE_ID_ATTEMPTS} attempts"
        )

    def get_public_by_share_id(self, share_id: str) -> PublicQueryView | None:
        """Public view of a shared query; None when unknown or not public."""
        record = self._find_public(share_id)
        if record is None:
            return None
        return PublicQueryView(
            title=record.title,
            text=record.text,
            tags=record.tags,
            created_at=record.created_at,
        )

    @abstractmethod
    def _insert(self, owner_id: str, title: str, text: str, tags: list[str]) -> QueryRecord: ...

    @abstractmethod
    def _list_by_owner(self, owner_id: str) -> list[QueryRecord]: ...

    @abstractmethod
    def _distinct_tags(self, owner_id: str) -> list[str]: ...

    @abstractmethod
    def _update(
        self, owner_id: str, query_id: str, title: str, text: str, tags: list[str]
    ) -> QueryRecord: ...

    @abstractmethod
    def _delete(self, owner_id: str, query_id: str) -> None: ...

    @abstractmethod
    def _share(self, owner_id: str, query_id: str, mint: Callable[[], str]) -> str:
        """
        Return the existing share id if public; otherwise store mint() with is_public=True
        in one conditional write. Raises ShareIdCollisionError on a duplicate share id.
        """

    @abstractmethod
    def _find_public(self, share_id: str) -> QueryRecord | None: ...


class StorageBackend(ABC):
    """A connected store: the user and query stores plus connectivity and shutdown."""

    name: str

    users: UserStore
    queries: QueryStore

    @abstractmethod
    def ping(self) -> bool:
        """Return True when the backing store answers a trivial command."""

    @abstractmethod
    def close(self) -> None:
        """Release the connection pool / client."""

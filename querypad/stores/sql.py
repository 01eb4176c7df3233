"""Relational adapter: users, queries and query_tags through SQLAlchemy."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from querypad.core.errors import (
    QueryNotFoundError,
    ShareIdCollisionError,
    StoreUnavailableError,
    UsernameTakenError,
)
from querypad.models import Base, Query, QueryTag, User
from querypad.schemas.query import QueryRecord
from querypad.schemas.user import UserRecord
from querypad.services.sharing import DEFAULT_SHARE_ID_BYTES
from querypad.stores.base import QueryStore, StorageBackend, UserStore

logger = logging.getLogger(__name__)


def create_sql_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the engine; SQLite gets foreign keys on and, in memory, one shared connection."""
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True, echo=echo)

    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, echo=echo, **kwargs)

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def _parse_id(value: str) -> int | None:
    """Row ids are integers; anything else cannot match a row."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _to_record(row: Query) -> QueryRecord:
    # No position column: tags always come back alphabetically, fresh writes included.
    return QueryRecord(
        id=str(row.id),
        owner_id=str(row.user_id),
        title=row.title,
        text=row.text,
        tags=sorted(t.tag for t in row.tags),
        is_public=bool(row.is_public),
        share_id=row.share_id,
        created_at=_as_utc(row.created_at),
    )


@contextmanager
def _transaction(session_factory: sessionmaker) -> Iterator[Session]:
    """One committed unit of work; driver faults surface as StoreUnavailableError."""
    try:
        with session_factory.begin() as db:
            yield db
    except IntegrityError:
        raise
    except SQLAlchemyError as e:
        raise StoreUnavailableError("Database operation failed", cause=e) from e


class SqlUserStore(UserStore):
    """users table; the unique index on username is the only duplicate guard."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def create(self, username: str, password_hash: str) -> UserRecord:
        try:
            with _transaction(self._session_factory) as db:
                user = User(username=username, password_hash=password_hash)
                db.add(user)
                db.flush()
                return UserRecord(
                    id=str(user.id),
                    username=user.username,
                    password_hash=user.password_hash,
                )
        except IntegrityError as e:
            raise UsernameTakenError(username) from e

    def find_by_username(self, username: str) -> UserRecord | None:
        with _transaction(self._session_factory) as db:
            user = db.query(User).filter(User.username == username).first()
            if user is None:
                return None
            return UserRecord(
                id=str(user.id),
                username=user.username,
                password_hash=user.password_hash,
            )


class SqlQueryStore(QueryStore):
    """queries + query_tags; record and tag set always change in the same transaction."""

    def __init__(
        self,
        session_factory: sessionmaker,
        share_id_bytes: int = DEFAULT_SHARE_ID_BYTES,
    ) -> None:
        super().__init__(share_id_bytes=share_id_bytes)
        self._session_factory = session_factory

    def _owned(self, db: Session, owner_id: str, query_id: str) -> Query:
        owner, qid = _parse_id(owner_id), _parse_id(query_id)
        if owner is None or qid is None:
            raise QueryNotFoundError()
        row = db.query(Query).filter(Query.id == qid, Query.user_id == owner).first()
        if row is None:
            raise QueryNotFoundError()
        return row

    def _insert(self, owner_id: str, title: str, text: str, tags: list[str]) -> QueryRecord:
        owner = _parse_id(owner_id)
        if owner is None:
            raise StoreUnavailableError(f"Owner id {owner_id!r} is not a row id")
        try:
            with _transaction(self._session_factory) as db:
                row = Query(
                    user_id=owner,
                    title=title,
                    text=text,
                    is_public=False,
                    created_at=datetime.now(timezone.utc),
                    tags=[QueryTag(tag=t) for t in tags],
                )
                db.add(row)
                db.flush()
                return _to_record(row)
        except IntegrityError as e:
            raise StoreUnavailableError("Query insert rejected by the database", cause=e) from e

    def _list_by_owner(self, owner_id: str) -> list[QueryRecord]:
        owner = _parse_id(owner_id)
        if owner is None:
            return []
        with _transaction(self._session_factory) as db:
            rows = (
                db.query(Query)
                .filter(Query.user_id == owner)
                .order_by(Query.created_at.desc(), Query.id.desc())
                .all()
            )
            return [_to_record(r) for r in rows]

    def _distinct_tags(self, owner_id: str) -> list[str]:
        owner = _parse_id(owner_id)
        if owner is None:
            return []
        with _transaction(self._session_factory) as db:
            rows = (
                db.query(QueryTag.tag)
                .join(Query, Query.id == QueryTag.query_id)
                .filter(Query.user_id == owner)
                .distinct()
                .order_by(QueryTag.tag)
                .all()
            )
            return [tag for (tag,) in rows]

    def _update(
        self, owner_id: str, query_id: str, title: str, text: str, tags: list[str]
    ) -> QueryRecord:
        with _transaction(self._session_factory) as db:
            row = self._owned(db, owner_id, query_id)
            row.title = title
            row.text = text
            # Flush the removals before re-adding so (query_id, tag) keys can repeat.
            row.tags = []
            db.flush()
            row.tags = [QueryTag(tag=t) for t in tags]
            db.flush()
            return _to_record(row)

    def _delete(self, owner_id: str, query_id: str) -> None:
        with _transaction(self._session_factory) as db:
            row = self._owned(db, owner_id, query_id)
            db.delete(row)

    def _share(self, owner_id: str, query_id: str, mint: Callable[[], str]) -> str:
        try:
            with _transaction(self._session_factory) as db:
                row = self._owned(db, owner_id, query_id)
                if row.is_public and row.share_id:
                    return row.share_id
                share_id = mint()
                updated = (
                    db.query(Query)
                    .filter(Query.id == row.id, Query.is_public.is_(False))
                    .update(
                        {Query.is_public: True, Query.share_id: share_id},
                        synchronize_session=False,
                    )
                )
                if updated:
                    logger.info("Query shared", extra={"query_id": query_id})
                    return share_id
        except IntegrityError as e:
            raise ShareIdCollisionError("Share id already in use", cause=e) from e

        # Another request made it public between our read and the conditional update.
        with _transaction(self._session_factory) as db:
            return self._owned(db, owner_id, query_id).share_id

    def _find_public(self, share_id: str) -> QueryRecord | None:
        with _transaction(self._session_factory) as db:
            row = (
                db.query(Query)
                .filter(Query.share_id == share_id, Query.is_public.is_(True))
                .first()
            )
            return _to_record(row) if row is not None else None


class SqlBackend(StorageBackend):
    """One engine and session factory held for the life of the service."""

    name = "sql"

    def __init__(self, engine: Engine, share_id_bytes: int = DEFAULT_SHARE_ID_BYTES) -> None:
        self.engine = engine
        self._session_factory = sessionmaker(
            bind=engine, autoflush=False, expire_on_commit=False
        )
        self.users = SqlUserStore(self._session_factory)
        self.queries = SqlQueryStore(self._session_factory, share_id_bytes=share_id_bytes)

    def create_schema(self) -> None:
        """Create missing tables (local runs and tests; Alembic manages real databases)."""
        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.warning("Database ping failed", exc_info=True)
            return False

    def close(self) -> None:
        self.engine.dispose()

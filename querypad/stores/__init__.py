"""Store contracts and the relational / document adapters behind them."""

from typing import TYPE_CHECKING

from querypad.stores.base import QueryStore, StorageBackend, UserStore

if TYPE_CHECKING:
    from querypad.core.config import Settings

__all__ = ["QueryStore", "StorageBackend", "UserStore", "build_backend"]


def build_backend(settings: "Settings") -> StorageBackend:
    """Connect the adapter selected by STORE_BACKEND. Adapter modules import lazily."""
    if settings.STORE_BACKEND == "mongo":
        from pymongo import MongoClient

        from querypad.stores.mongo import MongoBackend

        client = MongoClient(
            settings.MONGO_URI.get_secret_value(),
            connectTimeoutMS=settings.MONGO_CONNECT_TIMEOUT_MS,
            socketTimeoutMS=settings.MONGO_SOCKET_TIMEOUT_MS,
            serverSelectionTimeoutMS=settings.MONGO_CONNECT_TIMEOUT_MS,
        )
        return MongoBackend(
            client, settings.MONGO_DB_NAME, share_id_bytes=settings.SHARE_ID_BYTES
        )

    from querypad.stores.sql import SqlBackend, create_sql_engine

    backend = SqlBackend(
        create_sql_engine(settings.DATABASE_URL, echo=settings.DEBUG),
        share_id_bytes=settings.SHARE_ID_BYTES,
    )
    if settings.AUTO_CREATE_SCHEMA:
        backend.create_schema()
    return backend

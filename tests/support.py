"""Backends and clients shared by the store and API tests."""

import mongomock
from fastapi.testclient import TestClient

from querypad.core.database import StoreProvider
from querypad.core.config import get_settings
from querypad.main import app
from querypad.stores.base import StorageBackend
from querypad.stores.mongo import MongoBackend
from querypad.stores.sql import SqlBackend, create_sql_engine


def make_sql_backend(database_url: str = "sqlite://") -> SqlBackend:
    """Fresh SQLite backend with the schema created."""
    backend = SqlBackend(create_sql_engine(database_url))
    backend.create_schema()
    return backend


def make_mongo_backend() -> MongoBackend:
    """Fresh in-memory MongoDB backend."""
    return MongoBackend(mongomock.MongoClient(), "querypad_test")


def make_client(backend: StorageBackend) -> TestClient:
    """TestClient whose app serves every request from the given backend."""
    app.state.stores = StoreProvider(get_settings(), factory=lambda _settings: backend)
    return TestClient(app)

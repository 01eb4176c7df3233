"""Unit tests for the store lifecycle: StoreProvider single-flight init and build_backend."""

import threading
import time
import unittest
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import mongomock

from querypad.core.config import Settings
from querypad.core.database import StoreProvider
from querypad.stores import build_backend
from querypad.stores.mongo import MongoBackend
from querypad.stores.sql import SqlBackend


def _settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestStoreProvider(unittest.TestCase):
    """The backend is built once, even when first requests arrive together."""

    def test_builds_lazily(self) -> None:
        factory = MagicMock()
        provider = StoreProvider(_settings(), factory=factory)
        factory.assert_not_called()
        backend = provider.get()
        self.assertIs(provider.get(), backend)
        factory.assert_called_once()

    def test_concurrent_first_use_builds_once(self) -> None:
        calls = []
        barrier = threading.Barrier(8)

        def slow_factory(_settings: Settings) -> MagicMock:
            calls.append(1)
            time.sleep(0.05)
            return MagicMock()

        provider = StoreProvider(_settings(), factory=slow_factory)

        def first_use(_: int) -> object:
            barrier.wait()
            return provider.get()

        with ThreadPoolExecutor(max_workers=8) as pool:
            backends = list(pool.map(first_use, range(8)))
        self.assertEqual(len(calls), 1)
        self.assertTrue(all(b is backends[0] for b in backends))

    def test_close_releases_and_rebuilds(self) -> None:
        first, second = MagicMock(), MagicMock()
        provider = StoreProvider(_settings(), factory=MagicMock(side_effect=[first, second]))
        self.assertIs(provider.get(), first)
        provider.close()
        first.close.assert_called_once()
        self.assertIs(provider.get(), second)

    def test_close_without_backend_is_noop(self) -> None:
        factory = MagicMock()
        StoreProvider(_settings(), factory=factory).close()
        factory.assert_not_called()


class TestBuildBackend(unittest.TestCase):
    """build_backend connects the adapter chosen by STORE_BACKEND."""

    def test_sql_backend_with_auto_schema(self) -> None:
        backend = build_backend(_settings(DATABASE_URL="sqlite://", AUTO_CREATE_SCHEMA=True))
        try:
            self.assertIsInstance(backend, SqlBackend)
            self.assertTrue(backend.ping())
            user = backend.users.create("alice", "hash")
            self.assertEqual(backend.users.find_by_username("alice").id, user.id)
        finally:
            backend.close()

    def test_share_id_bytes_passed_to_store(self) -> None:
        backend = build_backend(
            _settings(DATABASE_URL="sqlite://", AUTO_CREATE_SCHEMA=True, SHARE_ID_BYTES=16)
        )
        try:
            owner = backend.users.create("alice", "hash").id
            query = backend.queries.create(owner, "t", "x")
            self.assertEqual(len(backend.queries.share(owner, query.id)), 32)
        finally:
            backend.close()

    @patch("pymongo.MongoClient", mongomock.MongoClient)
    def test_mongo_backend(self) -> None:
        backend = build_backend(
            _settings(
                STORE_BACKEND="mongo",
                MONGO_URI="mongodb://localhost:27017",
                MONGO_DB_NAME="querypad_build_test",
            )
        )
        self.assertIsInstance(backend, MongoBackend)
        user = backend.users.create("alice", "hash")
        self.assertEqual(backend.users.find_by_username("alice").id, user.id)


if __name__ == "__main__":
    unittest.main()

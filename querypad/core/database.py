"""Backing-store lifecycle: one lazily built backend per process, injected into routes."""

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Request

from querypad.stores import QueryStore, StorageBackend, UserStore, build_backend

if TYPE_CHECKING:
    from querypad.core.config import Settings

logger = logging.getLogger(__name__)


class StoreProvider:
    """
    Builds the configured backend on first use and keeps it until close().

    Concurrent first calls are single-flight: the lock is only taken while the
    backend is still missing, and re-checked under it.
    """

    def __init__(
        self,
        settings: "Settings",
        factory: Callable[["Settings"], StorageBackend] = build_backend,
    ) -> None:
        self._settings = settings
        self._factory = factory
        self._lock = threading.Lock()
        self._backend: StorageBackend | None = None

    def get(self) -> StorageBackend:
        backend = self._backend
        if backend is None:
            with self._lock:
                if self._backend is None:
                    self._backend = self._factory(self._settings)
                    logger.info(
                        "Store backend initialized",
                        extra={"backend": self._settings.STORE_BACKEND},
                    )
                backend = self._backend
        return backend

    def close(self) -> None:
        with self._lock:
            if self._backend is not None:
                self._backend.close()
                self._backend = None


def get_backend(request: Request) -> StorageBackend:
    """Dependency that returns the process-wide backend held on app.state."""
    return request.app.state.stores.get()


def get_user_store(backend: Annotated[StorageBackend, Depends(get_backend)]) -> UserStore:
    return backend.users


def get_query_store(backend: Annotated[StorageBackend, Depends(get_backend)]) -> QueryStore:
    return backend.queries

"""GET /health: liveness plus a ping of the configured store."""

from typing import Annotated

from fastapi import APIRouter, Depends

from querypad.core.config import settings
from querypad.core.database import get_backend
from querypad.schemas.health import HealthResponse
from querypad.stores import StorageBackend

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(backend: Annotated[StorageBackend, Depends(get_backend)]) -> HealthResponse:
    """Always 200 while the process serves; `database` reports whether the store answered a ping."""
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        backend=backend.name,
        database="connected" if backend.ping() else "disconnected",
    )

"""Pydantic request/response schemas."""

from querypad.schemas.auth import (
    Credentials,
    LoginResponse,
    LoginUser,
    MessageResponse,
    SessionIdentity,
)
from querypad.schemas.health import HealthResponse
from querypad.schemas.query import (
    PublicQueryView,
    QueryOut,
    QueryRecord,
    QueryWrite,
    ShareResponse,
)
from querypad.schemas.user import UserRecord

__all__ = [
    "Credentials",
    "HealthResponse",
    "LoginResponse",
    "LoginUser",
    "MessageResponse",
    "PublicQueryView",
    "QueryOut",
    "QueryRecord",
    "QueryWrite",
    "SessionIdentity",
    "ShareResponse",
    "UserRecord",
]

"""Stored user record shared by the credential store adapters."""

from pydantic import BaseModel


class UserRecord(BaseModel):
    """User account. password_hash never leaves the server."""

    id: str
    username: str
    password_hash: str

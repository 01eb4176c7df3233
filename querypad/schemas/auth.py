"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """Username and password for signup and login. Presence is checked by the handlers (400)."""

    username: str | None = Field(default=None, description="Username")
    password: str | None = Field(default=None, description="Password")


class LoginUser(BaseModel):
    """Public part of the logged-in user."""

    username: str


class LoginResponse(BaseModel):
    """JWT returned after successful login. Send it as: Authorization: Bearer <token>"""

    token: str = Field(..., description="JWT access token")
    user: LoginUser


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str


class SessionIdentity(BaseModel):
    """Identity decoded from a bearer token; never persisted."""

    user_id: str
    username: str
    expires_at: datetime

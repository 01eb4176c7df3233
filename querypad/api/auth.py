"""Signup, JWT login and the bearer-token dependency (get_current_user)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from querypad.core.database import get_user_store
from querypad.core.errors import InvalidTokenError, UsernameTakenError, ValidationError
from querypad.core.security import create_access_token, decode_access_token
from querypad.schemas.auth import (
    Credentials,
    LoginResponse,
    LoginUser,
    MessageResponse,
    SessionIdentity,
)
from querypad.services.accounts import authenticate_user, register_user
from querypad.stores import UserStore

router = APIRouter()
security = HTTPBearer(auto_error=False)


@router.post("/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: Credentials,
    users: Annotated[UserStore, Depends(get_user_store)],
) -> MessageResponse:
    """Create an account. Duplicate usernames are rejected with 409."""
    try:
        register_user(users, body.username, body.password)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except UsernameTakenError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return MessageResponse(message="User created successfully.")


@router.post("/login", response_model=LoginResponse)
def login(
    body: Credentials,
    users: Annotated[UserStore, Depends(get_user_store)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns a JWT valid for JWT_EXPIRE_MINUTES.
    Include the token in the Authorization header as: Bearer <token>
    """
    try:
        user = authenticate_user(users, body.username, body.password)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials.",
        )
    token = create_access_token(user_id=user.id, username=user.username)
    return LoginResponse(token=token, user=LoginUser(username=user.username))


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> SessionIdentity:
    """
    Dependency: require a valid Bearer JWT and return the identity it carries.
    Raises 401 if missing or invalid. Ownership is checked by the query store, not here.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_access_token(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

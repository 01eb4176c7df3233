"""Signup and login on top of the credential store."""

import logging

from querypad.core.errors import ValidationError
from querypad.core.security import (
    PASSWORD_MAX_LEN,
    USERNAME_MAX_LEN,
    hash_password,
    verify_password,
)
from querypad.schemas.user import UserRecord
from querypad.stores.base import UserStore

logger = logging.getLogger(__name__)


def _require_credentials(username: str | None, password: str | None) -> tuple[str, str]:
    """Return (stripped username, password) or raise ValidationError if either is missing."""
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("Username and password are required.")
    return username, password


def register_user(users: UserStore, username: str | None, password: str | None) -> UserRecord:
    """
    Create an account with a bcrypt-hashed password.

    Raises ValidationError for missing or oversized fields and UsernameTakenError when
    the store's unique constraint rejects the username.
    """
    username, password = _require_credentials(username, password)
    if len(username) > USERNAME_MAX_LEN:
        raise ValidationError("Invalid username length.")
    if len(password) > PASSWORD_MAX_LEN:
        raise ValidationError("Invalid password length.")

    user = users.create(username, hash_password(password))
    logger.info("User created", extra={"user_id": user.id})
    return user


def authenticate_user(
    users: UserStore, username: str | None, password: str | None
) -> UserRecord | None:
    """
    Return the user when the password matches, else None.

    Unknown username and wrong password give the same result.
    """
    username, password = _require_credentials(username, password)
    user = users.find_by_username(username)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login rejected")
        return None
    return user

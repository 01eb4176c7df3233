"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from querypad.core.config import settings
from querypad.core.errors import InvalidTokenError
from querypad.schemas.auth import SessionIdentity

# Max lengths for username and password validation.
USERNAME_MAX_LEN = 255
PASSWORD_MAX_LEN = 128

# bcrypt only looks at the first 72 bytes of the password.
BCRYPT_MAX_BYTES = 72


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    user_id: str,
    username: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token with sub (user id), username, iat and exp."""
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRE_MINUTES))
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> SessionIdentity:
    """
    Decode and validate a JWT and return the identity it carries.
    Raises InvalidTokenError on bad signature, malformed payload, or expiry.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidTokenError("Token has expired", cause=e) from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError("Token is not valid", cause=e) from e

    sub = payload.get("sub")
    username = payload.get("username")
    if not isinstance(sub, str) or not sub or not isinstance(username, str) or not username:
        raise InvalidTokenError("Invalid token payload")
    return SessionIdentity(
        user_id=sub,
        username=username,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
    )

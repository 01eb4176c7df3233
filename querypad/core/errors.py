"""Domain exceptions raised by stores and services; routes map them to HTTP status codes."""


class QueryPadError(Exception):
    """Base class for expected application errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class ValidationError(QueryPadError):
    """A required field is missing or empty (400)."""


class QueryValidationError(ValidationError):
    """Query title or text is missing or blank."""


class UsernameTakenError(QueryPadError):
    """Signup for a username that already exists (409)."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("Username already exists.")


class InvalidTokenError(QueryPadError):
    """Bearer token is malformed, tampered with, or expired (401)."""


class QueryNotFoundError(QueryPadError):
    """
    Query does not exist or belongs to another user (404).

    Both cases raise this same error so callers cannot tell another user's record from a missing one.
    """

    def __init__(self) -> None:
        super().__init__("Query not found.")


class ShareIdCollisionError(QueryPadError):
    """A freshly minted share id hit the unique constraint; caller retries with a new one."""


class StoreUnavailableError(QueryPadError):
    """Backing store unreachable or failed unexpectedly (500, detail never sent to clients)."""

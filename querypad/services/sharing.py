"""Share id minting for public query links."""

import secrets

# Retries after a share id collides with an existing one.
MAX_SHARE_ID_ATTEMPTS = 3

DEFAULT_SHARE_ID_BYTES = 12


def new_share_id(num_bytes: int = DEFAULT_SHARE_ID_BYTES) -> str:
    """Return an unguessable hex share id (2 * num_bytes characters)."""
    return secrets.token_hex(num_bytes)

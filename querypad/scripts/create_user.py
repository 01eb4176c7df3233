"""
Create a user from the command line. Run from project root:
  python -m querypad.scripts.create_user USERNAME PASSWORD
Uses the store selected by STORE_BACKEND, the same way the API does.
"""
import argparse
import logging
import sys

from querypad.core.config import get_settings
from querypad.core.errors import StoreUnavailableError, UsernameTakenError, ValidationError
from querypad.services.accounts import register_user
from querypad.stores import build_backend

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a QueryPad user.")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password (1-128 chars)")
    args = parser.parse_args(argv)

    backend = build_backend(get_settings())
    try:
        user = register_user(backend.users, args.username, args.password)
    except (ValidationError, UsernameTakenError) as e:
        print(e.message, file=sys.stderr)
        return 1
    except StoreUnavailableError as e:
        logger.exception("Could not create user: %s", e.message)
        return 1
    finally:
        backend.close()
    print(f"Created user '{user.username}'.")
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    sys.exit(main())

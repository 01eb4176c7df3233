"""Unit tests for querypad.core.config.Settings validation."""

import unittest

from pydantic import ValidationError

from querypad.core.config import Settings


def _settings(**overrides: object) -> Settings:
    """Build Settings from explicit values only (no .env file)."""
    return Settings(_env_file=None, **overrides)


class TestSettingsValidation(unittest.TestCase):

    def test_sqlite_and_postgres_urls_accepted(self) -> None:
        self.assertEqual(_settings(DATABASE_URL="sqlite://").DATABASE_URL, "sqlite://")
        url = "postgresql+psycopg2://u:p@localhost:5432/querypad"
        self.assertEqual(_settings(DATABASE_URL=f"  {url} ").DATABASE_URL, url)

    def test_unknown_database_scheme_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mysql://u:p@localhost/querypad")

    def test_mongo_backend_requires_uri(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(STORE_BACKEND="mongo", MONGO_URI=None)

    def test_mongo_backend_with_uri(self) -> None:
        s = _settings(STORE_BACKEND="mongo", MONGO_URI="mongodb://localhost:27017")
        self.assertEqual(s.MONGO_URI.get_secret_value(), "mongodb://localhost:27017")

    def test_urls_with_surrounding_whitespace_are_stripped(self) -> None:
        self.assertEqual(
            _settings(DATABASE_URL=" sqlite:///./x.db").DATABASE_URL, "sqlite:///./x.db"
        )
        s = _settings(STORE_BACKEND="mongo", MONGO_URI="  mongodb://localhost:27017\n")
        self.assertEqual(s.MONGO_URI.get_secret_value(), "mongodb://localhost:27017")

    def test_blank_database_url_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="   ")

    def test_mongo_uri_scheme_checked(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(STORE_BACKEND="mongo", MONGO_URI="http://localhost:27017")

    def test_api_prefix_normalized(self) -> None:
        self.assertEqual(_settings(API_PREFIX="/api/").API_PREFIX, "/api")
        self.assertEqual(_settings(API_PREFIX="").API_PREFIX, "")
        with self.assertRaises(ValidationError):
            _settings(API_PREFIX="api")

    def test_bcrypt_rounds_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(BCRYPT_ROUNDS=3)
        with self.assertRaises(ValidationError):
            _settings(BCRYPT_ROUNDS=17)

    def test_jwt_expire_minutes_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_EXPIRE_MINUTES=0)

    def test_blank_jwt_secret_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_SECRET="   ")

    def test_log_level_uppercased(self) -> None:
        self.assertEqual(_settings(LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")


if __name__ == "__main__":
    unittest.main()

"""Test env: set before the querypad package (and its cached settings) is imported."""

import os

os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("STORE_BACKEND", "sql")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

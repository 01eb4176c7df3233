"""Tests for the create_user CLI script."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import MagicMock, patch

from querypad.core.security import verify_password
from querypad.scripts import create_user
from tests.support import make_sql_backend


class TestCreateUserScript(unittest.TestCase):

    def setUp(self) -> None:
        self.backend = make_sql_backend()
        self.real_close = self.backend.close
        self.backend.close = MagicMock()
        patcher = patch.object(create_user, "build_backend", return_value=self.backend)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        self.real_close()

    def test_creates_user_with_hashed_password(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            code = create_user.main(["carol", "s3cret"])
        self.assertEqual(code, 0)
        self.assertIn("Created user 'carol'", out.getvalue())
        stored = self.backend.users.find_by_username("carol")
        self.assertTrue(verify_password("s3cret", stored.password_hash))
        self.backend.close.assert_called_once()

    def test_duplicate_username_fails(self) -> None:
        with redirect_stdout(io.StringIO()):
            create_user.main(["carol", "s3cret"])
        err = io.StringIO()
        with redirect_stderr(err):
            code = create_user.main(["carol", "other"])
        self.assertEqual(code, 1)
        self.assertIn("already exists", err.getvalue())

    def test_blank_username_fails(self) -> None:
        err = io.StringIO()
        with redirect_stderr(err):
            code = create_user.main(["   ", "s3cret"])
        self.assertEqual(code, 1)
        self.assertIn("required", err.getvalue())


if __name__ == "__main__":
    unittest.main()

"""Developer token CLI tests (no database access)."""

from __future__ import annotations

import contextlib
import io
import unittest
from unittest.mock import patch

from app.infrastructure.security.token_service import TokenService
from scripts import issue_token
from tests.helpers import SECRET, make_settings


class IssueTokenCliTests(unittest.TestCase):
    def test_prints_verifiable_token_without_check(self) -> None:
        out = io.StringIO()
        with patch.object(issue_token, "settings", make_settings()), contextlib.redirect_stdout(out):
            code = issue_token.main(["u1", "--no-check", "--minutes", "3"])

        self.assertEqual(code, 0)
        payload = TokenService(SECRET).verify_access_token(out.getvalue().strip())
        self.assertEqual(payload["sub"], "u1")
        self.assertEqual(payload["exp"] - payload["iat"], 180)

    def test_refuses_without_secret(self) -> None:
        err = io.StringIO()
        with patch.object(issue_token, "settings", make_settings(jwt_secret=None)), contextlib.redirect_stderr(err):
            code = issue_token.main(["u1", "--no-check"])

        self.assertEqual(code, 2)
        self.assertIn("JWT_SECRET", err.getvalue())

    def test_unknown_user_is_reported(self) -> None:
        async def _missing(_user_id: str) -> bool:
            return False

        err = io.StringIO()
        with (
            patch.object(issue_token, "settings", make_settings()),
            patch.object(issue_token, "_user_exists", _missing),
            contextlib.redirect_stderr(err),
        ):
            code = issue_token.main(["ghost"])

        self.assertEqual(code, 1)
        self.assertIn("ghost", err.getvalue())


if __name__ == "__main__":
    unittest.main()

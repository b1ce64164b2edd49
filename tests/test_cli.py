"""
Tests for the Flask CLI commands (create-user, import-courses).
"""

import json
import tempfile
import unittest
from pathlib import Path

from nesttask.cli import create_user_command, import_courses_command
from nesttask.store import eq

from tests.base import AppTestCase


class TestCLI(AppTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.runner = self.app.test_cli_runner()

    def test_create_user(self) -> None:
        result = self.runner.invoke(create_user_command, ["admin", "--role", "admin", "--section", "sec-a"])
        self.assertEqual(result.exit_code, 0, result.output)
        row = self.store.select_one_or_none("users", eq("username", "admin"))
        self.assertEqual((row["role"], row["section_id"]), ("admin", "sec-a"))

    def test_import_courses_from_file(self) -> None:
        self.make_user("admin", role="admin")
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "courses.json"
            p.write_text(json.dumps([
                {"name": "Physics", "code": "PHY101", "teacher": "Dr. X"},
                {"name": "Physics", "code": "PHY101"},
            ]), encoding="utf-8")
            result = self.runner.invoke(import_courses_command, [str(p), "--as", "admin"])

        # second row duplicates the first, so the command reports failure
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Imported 1 of 2 courses", result.output)
        self.assertIn("already exists", result.output)

    def test_import_unknown_user(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "courses.json"
            p.write_text("[]", encoding="utf-8")
            result = self.runner.invoke(import_courses_command, [str(p), "--as", "ghost"])
        self.assertNotEqual(result.exit_code, 0)


if __name__ == "__main__":
    unittest.main()

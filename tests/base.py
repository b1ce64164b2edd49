"""
Shared fixture for tests that need an application and a database.

Every test case gets a fresh app built from ``config.TestConfig`` (in-memory
SQLite), so tests never see each other's rows.
"""

import unittest

from werkzeug.security import generate_password_hash

from nesttask import create_app
from nesttask.extensions import db
from nesttask.permissions import AuthorizationContext
from nesttask.store import Store


class AppTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.app = create_app("config.TestConfig")
        self.ctx = self.app.app_context()
        self.ctx.push()
        self.store = Store()

    def tearDown(self) -> None:
        db.session.remove()
        db.drop_all()
        self.ctx.pop()

    def make_user(self, username, role="user", section=None, password="secret"):
        row = self.store.insert("users", {
            "username": username,
            "password_hash": generate_password_hash(password),
            "role": role,
            "section_id": section,
        })
        return AuthorizationContext(user_id=row["id"], role=role, section_id=section)

    def add_course(self, code, **fields):
        record = {"name": fields.pop("name", code), "code": code, "class_time": "", "credit": 3}
        record.update(fields)
        return self.store.insert("courses", record)

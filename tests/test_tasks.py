import unittest
from datetime import date

from nesttask.errors import PermissionDenied, ValidationError
from nesttask.services import tasks as svc

from tests.base import AppTestCase


class TestOverdue(unittest.TestCase):
    def test_past_due_and_open(self) -> None:
        task = {"due_date": date(2024, 1, 1), "status": "in-progress"}
        self.assertTrue(svc.is_overdue(task, today=date(2024, 1, 2)))

    def test_completed_is_never_overdue(self) -> None:
        task = {"due_date": date(2024, 1, 1), "status": "completed"}
        self.assertFalse(svc.is_overdue(task, today=date(2024, 1, 2)))

    def test_due_today_is_not_overdue(self) -> None:
        task = {"due_date": date(2024, 1, 2), "status": "my-tasks"}
        self.assertFalse(svc.is_overdue(task, today=date(2024, 1, 2)))

    def test_accepts_task_entities(self) -> None:
        task = {"dueDate": "2024-01-01", "status": "my-tasks"}
        self.assertTrue(svc.is_overdue(task, today=date(2024, 3, 1)))


class TestTaskVisibility(AppTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.make_user("admin", role="admin")
        self.sa = self.make_user("sa", role="section_admin", section="sec-a")
        self.alice = self.make_user("alice", section="sec-a")
        self.bob = self.make_user("bob", section="sec-b")

    def task(self, ctx, name, section_id=None, **fields):
        payload = {"name": name, "dueDate": "2030-05-01", "category": "assignment"}
        payload.update(fields)
        return svc.create_task(self.store, payload, ctx, section_id=section_id)

    def names(self, ctx):
        return sorted(t["name"] for t in svc.fetch_tasks(self.store, ctx))

    def test_admin_sees_everything(self) -> None:
        self.task(self.admin, "global")
        self.task(self.alice, "alice-own")
        self.task(self.bob, "bob-own")
        self.assertEqual(self.names(self.admin), ["alice-own", "bob-own", "global"])

    def test_section_admin_sees_section_tasks_and_members_tasks(self) -> None:
        created = self.task(self.sa, "sec-a quiz")
        self.assertTrue(created["isAdminTask"])
        self.assertEqual(created["sectionId"], "sec-a")
        self.task(self.alice, "alice-own")
        self.task(self.bob, "bob-own")
        self.task(self.admin, "sec-b only", section_id="sec-b")
        self.assertEqual(self.names(self.sa), ["alice-own", "sec-a quiz"])

    def test_user_sees_own_and_relevant_admin_tasks(self) -> None:
        self.task(self.admin, "global")
        self.task(self.sa, "sec-a quiz")
        self.task(self.admin, "sec-b only", section_id="sec-b")
        self.task(self.alice, "alice-own")
        self.task(self.bob, "bob-own")
        self.assertEqual(self.names(self.alice), ["alice-own", "global", "sec-a quiz"])

    def test_user_task_is_personal(self) -> None:
        created = self.task(self.alice, "mine", section_id="sec-b")
        self.assertFalse(created["isAdminTask"])
        self.assertIsNone(created["sectionId"])

    def test_entities_carry_overdue_flag(self) -> None:
        self.task(self.alice, "late", dueDate="2020-01-01")
        self.task(self.alice, "upcoming")
        flags = {t["name"]: t["isOverdue"] for t in svc.fetch_tasks(self.store, self.alice)}
        self.assertEqual(flags, {"late": True, "upcoming": False})

    def test_validation(self) -> None:
        with self.assertRaises(ValidationError):
            self.task(self.alice, "bad", category="all")
        with self.assertRaises(ValidationError):
            self.task(self.alice, "bad", dueDate="next week")
        with self.assertRaises(ValidationError):
            svc.create_task(self.store, {"name": "no date"}, self.alice)

    def test_only_owner_or_admin_can_change(self) -> None:
        created = self.task(self.alice, "mine")
        with self.assertRaises(PermissionDenied):
            svc.update_task(self.store, created["id"], {"status": "completed"}, self.bob)
        updated = svc.update_task(self.store, created["id"], {"status": "completed"}, self.alice)
        self.assertEqual(updated["status"], "completed")
        self.assertTrue(svc.delete_task(self.store, created["id"], self.admin))
        self.assertFalse(svc.delete_task(self.store, created["id"], self.admin))

    def test_anonymous_is_rejected(self) -> None:
        with self.assertRaises(PermissionDenied):
            svc.fetch_tasks(self.store, None)


if __name__ == "__main__":
    unittest.main()

import unittest

from nesttask.permissions import (
    ADMIN, COURSE_EDITORS, SECTION_ADMIN, SUPER_ADMIN, USER,
    AuthorizationContext, check_course_mutation, check_role,
)


class TestCheckRole(unittest.TestCase):
    def test_missing_role_is_denied(self) -> None:
        decision = check_role(None, COURSE_EDITORS)
        self.assertFalse(decision.allowed)
        self.assertEqual(decision.reason, "not signed in")

    def test_role_outside_required_set_is_denied(self) -> None:
        self.assertFalse(check_role(USER, COURSE_EDITORS).allowed)
        self.assertFalse(check_role(SUPER_ADMIN, COURSE_EDITORS).allowed)

    def test_listed_role_is_allowed(self) -> None:
        self.assertTrue(check_role(ADMIN, COURSE_EDITORS).allowed)


class TestCourseMutation(unittest.TestCase):
    def test_section_admin_needs_a_section(self) -> None:
        ctx = AuthorizationContext("u1", SECTION_ADMIN, "sec-a")
        decision = check_course_mutation(ctx, None)
        self.assertFalse(decision.allowed)
        self.assertEqual(decision.reason, "section required")
        self.assertTrue(check_course_mutation(ctx, "sec-a").allowed)

    def test_admin_is_allowed_with_or_without_section(self) -> None:
        ctx = AuthorizationContext("u2", ADMIN)
        self.assertTrue(check_course_mutation(ctx, None).allowed)
        self.assertTrue(check_course_mutation(ctx, "sec-b").allowed)

    def test_anonymous_is_denied(self) -> None:
        self.assertFalse(check_course_mutation(None, "sec-a").allowed)


if __name__ == "__main__":
    unittest.main()

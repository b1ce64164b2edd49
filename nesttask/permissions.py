"""
Role checks used to fail fast before a mutation is sent to the database.

These checks only exist so the caller gets a clear message early. They are
not an authorization boundary: access control is enforced by the database
layer and by the route decorators in front of it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, NamedTuple, Optional

from flask_login import current_user

from .errors import PermissionDenied

USER = "user"
SECTION_ADMIN = "section_admin"
ADMIN = "admin"
SUPER_ADMIN = "super-admin"
ROLES = (USER, SECTION_ADMIN, ADMIN, SUPER_ADMIN)

COURSE_EDITORS = frozenset({ADMIN, SECTION_ADMIN})

SECTION_REQUIRED = "section required"


@dataclass(frozen=True)
class AuthorizationContext:
    user_id: Optional[str]
    role: Optional[str]
    section_id: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "AuthorizationContext":
        return cls(user_id=user.id, role=user.role or USER, section_id=user.section_id)


class Decision(NamedTuple):
    allowed: bool
    reason: Optional[str] = None


ALLOW = Decision(True)


def check_role(role: Optional[str], required: Iterable[str]) -> Decision:
    if not role:
        return Decision(False, "not signed in")
    if role not in required:
        return Decision(False, f"role {role!r} is not allowed")
    return ALLOW


def check_course_mutation(context: Optional[AuthorizationContext], section: Optional[str]) -> Decision:
    decision = check_role(context.role if context else None, COURSE_EDITORS)
    if not decision.allowed:
        return decision
    if context.role == SECTION_ADMIN and not section:
        return Decision(False, SECTION_REQUIRED)
    return ALLOW


def current_authorization() -> Optional[AuthorizationContext]:
    """Snapshot the signed-in user, or ``None`` for anonymous requests."""
    if not current_user.is_authenticated:
        return None
    return AuthorizationContext.from_user(current_user)


def require(decision: Decision, action: str) -> None:
    if not decision.allowed:
        raise PermissionDenied(f"Permission denied: {action} ({decision.reason})")

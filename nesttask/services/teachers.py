"""
Teacher management and the name-based lookups used by course import.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import NotFoundError, StoreError, ValidationError
from ..mappers import TEACHER_FIELDS, changes_from_payload, teacher_from_row
from ..permissions import COURSE_EDITORS, check_role, require
from ..store import eq, ieq

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeacherResolution:
    teacher_id: Optional[str]
    created: bool = False
    warning: Optional[str] = None


def fetch_teachers(store):
    return [teacher_from_row(r) for r in store.select("teachers", order_by="name")]


def _require_editor(context, action):
    require(check_role(context.role if context else None, COURSE_EDITORS), action)


def create_teacher(store, payload, context):
    _require_editor(context, "only admins and section admins can manage teachers")
    record = changes_from_payload(payload, TEACHER_FIELDS)
    name = (record.get("name") or "").strip()
    phone = (record.get("phone") or "").strip()
    if not name or not phone:
        raise ValidationError("Teacher name and phone are required")
    record.update(name=name, phone=phone)
    if not record.get("department") and context.section_id:
        record["department"] = context.section_id
    return teacher_from_row(store.insert("teachers", record))


def update_teacher(store, teacher_id, payload, context):
    _require_editor(context, "only admins and section admins can manage teachers")
    changes = changes_from_payload(payload, TEACHER_FIELDS)
    if "name" in changes and not (changes["name"] or "").strip():
        raise ValidationError("Teacher name cannot be empty")
    row = store.update("teachers", [eq("id", teacher_id)], changes)
    if row is None:
        raise NotFoundError("Teacher not found")
    return teacher_from_row(row)


def delete_teacher(store, teacher_id, context):
    _require_editor(context, "only admins and section admins can manage teachers")
    return store.delete("teachers", eq("id", teacher_id)) > 0


def teacher_name_exists(store, name):
    """Case-insensitive name check. A failed lookup counts as "not found"."""
    try:
        return bool(store.select("teachers", ieq("name", name)))
    except StoreError as e:
        logger.warning("Teacher lookup for %r failed: %s", name, e)
        return False


def find_teacher_id(store, name):
    try:
        row = store.select_one_or_none("teachers", ieq("name", name))
    except StoreError as e:
        logger.warning("Could not fetch id of teacher %r: %s", name, e)
        return None
    return row["id"] if row else None


def resolve_or_create_teacher(store, name, department=None, placeholder_phone="N/A"):
    """
    Find the teacher called ``name`` or create a minimal record for it.

    Never raises for store failures: a failed creation comes back as a
    resolution without an id and with a warning, so the caller can still save
    the course.
    """
    if teacher_name_exists(store, name):
        teacher_id = find_teacher_id(store, name)
        logger.debug("Found existing teacher %r -> %s", name, teacher_id)
        return TeacherResolution(teacher_id)

    logger.info("Creating new teacher %r (department=%s)", name, department)
    try:
        row = store.insert("teachers", {"name": name, "phone": placeholder_phone,
                                        "department": department})
    except StoreError as e:
        return TeacherResolution(None, warning=f'Could not create teacher "{name}": {e}')
    return TeacherResolution(row["id"], created=True)

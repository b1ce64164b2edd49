from __future__ import annotations

import logging

from ..errors import NotFoundError, StoreError, ValidationError
from ..mappers import (
    COURSE_FIELDS, MATERIAL_FIELDS, changes_from_payload, class_times_from_payload,
    course_from_row, course_row, parse_credit, study_material_from_row,
)
from ..permissions import COURSE_EDITORS, SECTION_REQUIRED, check_course_mutation, check_role, require
from ..schedule import encode
from ..store import eq

logger = logging.getLogger(__name__)

CREATE_DENIALS = {SECTION_REQUIRED: "section admin must specify a section for the course"}


def fetch_courses(store):
    counts = store.count_by("study_materials", "course_id")
    rows = store.select("courses", order_by="created_at", descending=True)
    return [course_from_row(r, material_count=counts.get(r["id"], 0)) for r in rows]


def get_course(store, course_id):
    row = store.select_one_or_none("courses", eq("id", course_id))
    if row is None:
        raise NotFoundError("Course not found")
    return course_from_row(row)


def create_course(store, candidate, context):
    decision = check_course_mutation(context, candidate.section)
    require(decision, CREATE_DENIALS.get(decision.reason, "only admins and section admins can create courses"))
    if not candidate.name or not candidate.code:
        raise ValidationError("Course name and code are required")

    record = course_row(candidate)
    record["created_by"] = context.user_id
    logger.info("Creating course %s as %s (section=%s)", candidate.code, context.role, candidate.section)
    try:
        row = store.insert("courses", record)
    except StoreError as e:
        raise StoreError(f"Failed to create course: {e}", conflict=e.conflict) from e
    return course_from_row(row)


def update_course(store, course_id, payload, context):
    require(check_role(context.role if context else None, COURSE_EDITORS),
            "only admins and section admins can update courses")
    changes = changes_from_payload(payload, COURSE_FIELDS)
    if "credit" in changes:
        changes["credit"] = parse_credit(changes["credit"])
    if "classTimes" in payload:
        changes["class_time"] = encode(class_times_from_payload(payload["classTimes"]))
    row = store.update("courses", [eq("id", course_id)], changes)
    if row is None:
        raise NotFoundError("Course not found")
    return course_from_row(row)


def delete_course(store, course_id, context):
    """Delete a course and its materials. Returns ``False`` when nothing matched."""
    require(check_role(context.role if context else None, COURSE_EDITORS),
            "only admins and section admins can delete courses")
    deleted = store.delete("courses", eq("id", course_id))
    logger.info("Delete course %s: %s", course_id, "done" if deleted else "not found")
    return deleted > 0


# ---------- Study materials ----------

def _check_files(record):
    urls = record.get("file_urls")
    names = record.get("original_file_names")
    if urls is None and names is None:
        return
    if not isinstance(urls, list) or not isinstance(names, list) or len(urls) != len(names):
        raise ValidationError("fileUrls and originalFileNames must be lists of the same length")


def fetch_study_materials(store):
    courses = {c["id"]: c for c in store.select("courses")}
    rows = store.select("study_materials", order_by="created_at", descending=True)
    return [study_material_from_row(r, courses.get(r["course_id"])) for r in rows]


def create_study_material(store, payload, context):
    require(check_role(context.role if context else None, COURSE_EDITORS),
            "only admins and section admins can add study materials")
    record = changes_from_payload(payload, MATERIAL_FIELDS)
    if not (record.get("title") or "").strip():
        raise ValidationError("Title is required")
    record.setdefault("file_urls", [])
    record.setdefault("original_file_names", [])
    _check_files(record)
    course = store.select_one_or_none("courses", eq("id", record.get("course_id")))
    if course is None:
        raise NotFoundError("Course not found")
    record["created_by"] = context.user_id
    try:
        row = store.insert("study_materials", record)
    except StoreError as e:
        raise StoreError(f"Failed to create study material: {e}", conflict=e.conflict) from e
    return study_material_from_row(row, course)


def update_study_material(store, material_id, payload, context):
    require(check_role(context.role if context else None, COURSE_EDITORS),
            "only admins and section admins can edit study materials")
    changes = changes_from_payload(payload, MATERIAL_FIELDS)
    current = store.select_one_or_none("study_materials", eq("id", material_id))
    if current is None:
        raise NotFoundError("Study material not found")
    _check_files({
        "file_urls": changes.get("file_urls", current["file_urls"]),
        "original_file_names": changes.get("original_file_names", current["original_file_names"]),
    })
    course = store.select_one_or_none("courses", eq("id", changes.get("course_id", current["course_id"])))
    if course is None:
        raise NotFoundError("Course not found")
    row = store.update("study_materials", [eq("id", material_id)], changes)
    if row is None:
        raise NotFoundError("Study material not found")
    return study_material_from_row(row, course)


def delete_study_material(store, material_id, context):
    require(check_role(context.role if context else None, COURSE_EDITORS),
            "only admins and section admins can delete study materials")
    return store.delete("study_materials", eq("id", material_id)) > 0

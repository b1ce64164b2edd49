"""
Translation between store rows (snake_case dicts) and API entities (camelCase dicts).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from .errors import ValidationError
from .schedule import ClassTime, MalformedScheduleError, decode, encode

logger = logging.getLogger(__name__)

COURSE_FIELDS = {
    "name": "name",
    "code": "code",
    "teacher": "teacher",
    "telegramGroup": "telegram_group",
    "blcLink": "blc_link",
    "blcEnrollKey": "blc_enroll_key",
    "credit": "credit",
    "section": "section",
    "teacherId": "teacher_id",
}
MATERIAL_FIELDS = {
    "title": "title",
    "description": "description",
    "courseId": "course_id",
    "category": "category",
    "fileUrls": "file_urls",
    "originalFileNames": "original_file_names",
}
TEACHER_FIELDS = {"name": "name", "phone": "phone", "department": "department"}
TASK_FIELDS = {
    "name": "name",
    "category": "category",
    "dueDate": "due_date",
    "description": "description",
    "status": "status",
}


@dataclass
class CourseCandidate:
    """A course record submitted for creation, not yet checked against the store."""

    name: str
    code: str
    teacher: Optional[str] = None
    class_times: List[ClassTime] = field(default_factory=list)
    telegram_group: Optional[str] = None
    blc_link: Optional[str] = None
    blc_enroll_key: Optional[str] = None
    credit: float = 0
    section: Optional[str] = None
    teacher_id: Optional[str] = None


def _iso(value):
    return value.isoformat() if value is not None else None


def _text(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_credit(value) -> float:
    if value in (None, ""):
        return 0
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Credit must be a number, got {value!r}") from None


def class_times_from_payload(value) -> List[ClassTime]:
    if value in (None, ""):
        return []
    if isinstance(value, str):
        return decode(value)
    if not isinstance(value, list):
        raise ValidationError("classTimes must be a list")
    out = []
    for item in value:
        if not isinstance(item, Mapping):
            raise ValidationError("Each class time must be an object with day and time")
        out.append(ClassTime(day=str(item.get("day") or ""), time=str(item.get("time") or ""),
                             classroom=_text(item.get("classroom"))))
    return out


def candidate_from_payload(payload: Any) -> CourseCandidate:
    if not isinstance(payload, Mapping):
        raise ValidationError("Each course must be a JSON object")
    return CourseCandidate(
        name=_text(payload.get("name")) or "",
        code=_text(payload.get("code")) or "",
        teacher=_text(payload.get("teacher")),
        class_times=class_times_from_payload(payload.get("classTimes")),
        telegram_group=_text(payload.get("telegramGroup")),
        blc_link=_text(payload.get("blcLink")),
        blc_enroll_key=_text(payload.get("blcEnrollKey")),
        credit=parse_credit(payload.get("credit")),
        section=_text(payload.get("section")),
        teacher_id=_text(payload.get("teacherId")),
    )


def course_payloads(payload: Any) -> List[Any]:
    """Unwrap an import body into its list of rows.

    Only the outer shape is checked here. Each row is parsed by the importer
    so that one bad row is reported against that row instead of failing the
    whole batch.
    """
    if isinstance(payload, Mapping) and "courses" in payload:
        payload = payload["courses"]
    if not isinstance(payload, list):
        raise ValidationError("Expected a list of courses")
    return payload


def course_row(candidate: CourseCandidate) -> dict:
    return {
        "name": candidate.name,
        "code": candidate.code,
        "teacher": candidate.teacher,
        "class_time": encode(candidate.class_times),
        "telegram_group": candidate.telegram_group,
        "blc_link": candidate.blc_link,
        "blc_enroll_key": candidate.blc_enroll_key,
        "credit": candidate.credit,
        "section": candidate.section,
        "teacher_id": candidate.teacher_id,
    }


def changes_from_payload(payload: Any, fields: Mapping[str, str]) -> dict:
    """Pick the keys present in ``payload`` and rename them to column names."""
    if not isinstance(payload, Mapping):
        raise ValidationError("Expected a JSON object")
    return {column: payload[key] for key, column in fields.items() if key in payload}


def course_from_row(row: Mapping[str, Any], material_count: Optional[int] = None) -> dict:
    try:
        class_times = [ct.to_dict() for ct in decode(row.get("class_time"))]
    except MalformedScheduleError as e:
        logger.warning("Course %s has an unreadable class_time: %s", row.get("code"), e)
        class_times = []
    out = {
        "id": row["id"],
        "name": row["name"],
        "code": row["code"],
        "teacher": row.get("teacher"),
        "teacherId": row.get("teacher_id"),
        "classTimes": class_times,
        "telegramGroup": row.get("telegram_group"),
        "blcLink": row.get("blc_link"),
        "blcEnrollKey": row.get("blc_enroll_key"),
        "credit": row.get("credit"),
        "section": row.get("section"),
        "createdAt": _iso(row.get("created_at")),
        "createdBy": row.get("created_by"),
    }
    if material_count is not None:
        out["materialCount"] = material_count
    return out


def study_material_from_row(row: Mapping[str, Any], course: Optional[Mapping[str, Any]] = None) -> dict:
    out = {
        "id": row["id"],
        "title": row["title"],
        "description": row.get("description"),
        "courseId": row["course_id"],
        "category": row.get("category"),
        "fileUrls": list(row.get("file_urls") or []),
        "originalFileNames": list(row.get("original_file_names") or []),
        "createdAt": _iso(row.get("created_at")),
        "createdBy": row.get("created_by"),
    }
    if course is not None:
        out["course"] = course_from_row(course)
    return out


def teacher_from_row(row: Mapping[str, Any]) -> dict:
    return {"id": row["id"], "name": row["name"], "phone": row.get("phone"),
            "department": row.get("department")}


def task_from_row(row: Mapping[str, Any]) -> dict:
    return {
        "id": row["id"],
        "name": row["name"],
        "category": row["category"],
        "dueDate": _iso(row.get("due_date")),
        "description": row.get("description") or "",
        "status": row["status"],
        "isAdminTask": bool(row.get("is_admin_task")),
        "sectionId": row.get("section_id"),
        "createdAt": _iso(row.get("created_at")),
    }


def user_from_row(row: Mapping[str, Any]) -> dict:
    return {"id": row["id"], "username": row["username"], "name": row.get("name"),
            "role": row["role"], "sectionId": row.get("section_id")}

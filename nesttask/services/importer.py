"""
Bulk course import.

The import runs as one sequential loop over the candidates, in input order.
Every store call for row N (duplicate check, teacher lookup or creation,
insert) has finished before row N+1 starts, so a teacher created for row N is
found by row N+1 instead of being created twice. Keep it that way: the loop
must not be split across threads or tasks.

Rows may be parsed candidates or raw JSON objects; raw rows are parsed inside
the loop, so an unparsable row is one hard error and the rest still run.

Outcomes are collected per row instead of raised. Only the initial role check
rejects the whole batch; anything that goes wrong after that is recorded
against the row that caused it and the loop moves on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Union

from ..errors import StoreError, ValidationError
from ..mappers import CourseCandidate, candidate_from_payload, course_row
from ..permissions import COURSE_EDITORS, AuthorizationContext, check_course_mutation, check_role
from ..store import eq
from .teachers import resolve_or_create_teacher

logger = logging.getLogger(__name__)

BATCH_DENIED = "Bulk import failed: Permission denied: Only admins and section admins can import courses"


@dataclass(frozen=True)
class ImportOutcome:
    """
    One entry of the import report.

    ``warning`` outcomes are non-fatal: the row was skipped for a soft reason
    or saved with a remark. ``success`` marks informational warnings such as
    an auto-created teacher. Anything else is a hard error and the row was not
    saved.
    """

    message: str
    row: Optional[int] = None
    code: Optional[str] = None
    warning: bool = False
    success: bool = False

    @property
    def is_error(self) -> bool:
        return not self.warning

    def to_dict(self) -> dict:
        return {"message": self.message, "row": self.row, "code": self.code,
                "isWarning": self.warning, "isSuccess": self.success}


@dataclass
class ImportReport:
    success: int = 0
    errors: List[ImportOutcome] = field(default_factory=list)
    aborted: bool = False

    def fail(self, message, row=None, code=None):
        self.errors.append(ImportOutcome(message, row, code))

    def warn(self, message, row=None, code=None, success=False):
        self.errors.append(ImportOutcome(message, row, code, warning=True, success=success))

    @property
    def hard_errors(self) -> List[ImportOutcome]:
        return [o for o in self.errors if o.is_error]

    def to_dict(self) -> dict:
        return {"success": self.success, "errors": [o.to_dict() for o in self.errors]}


def bulk_import_courses(
    store,
    candidates: Sequence[Union[CourseCandidate, Mapping[str, Any]]],
    context: Optional[AuthorizationContext],
    placeholder_phone: str = "N/A",
) -> ImportReport:
    report = ImportReport()

    decision = check_role(context.role if context else None, COURSE_EDITORS)
    if not decision.allowed:
        logger.error("Bulk import rejected: %s", decision.reason)
        report.fail(BATCH_DENIED)
        report.aborted = True
        return report

    logger.info("Bulk importing %d courses as %s", len(candidates), context.role)
    for row, item in enumerate(candidates, start=1):
        code = _code_of(item)
        label = f"Course #{row} ({code})"
        try:
            candidate = item if isinstance(item, CourseCandidate) else candidate_from_payload(item)
        except ValidationError as e:
            report.fail(f"{label}: {e}", row, code)
            continue
        try:
            _import_one(store, candidate, context, report, row, label, placeholder_phone)
        except Exception as e:
            logger.exception("Error processing %s", label)
            report.fail(f"{label}: {e}", row, code)

    logger.info("Bulk import finished: %d imported, %d problems",
                report.success, len(report.errors))
    return report


def _code_of(item) -> Optional[str]:
    if isinstance(item, CourseCandidate):
        return item.code
    if isinstance(item, Mapping) and item.get("code") is not None:
        return str(item.get("code")).strip() or None
    return None


def _import_one(store, candidate, context, report, row, label, placeholder_phone):
    code = candidate.code

    if not check_course_mutation(context, candidate.section).allowed:
        report.warn(f"{label}: Section admin must specify a section for the course", row, code)
        return

    if not candidate.name or not code:
        report.fail(f"{label}: Course name and code are required", row, code)
        return

    record = course_row(candidate)

    try:
        existing = store.select_one_or_none("courses", eq("code", code))
    except StoreError as e:
        report.fail(f"{label}: Error checking for existing course: {e}", row, code)
        return
    if existing:
        report.fail(f"{label}: A course with this code already exists", row, code)
        return

    section = candidate.section or context.section_id
    teacher_id = candidate.teacher_id
    if not teacher_id and candidate.teacher:
        resolution = resolve_or_create_teacher(store, candidate.teacher, section, placeholder_phone)
        if resolution.created:
            report.warn(f'Created teacher "{candidate.teacher}" for course "{code}"', row, code,
                        success=True)
        elif resolution.warning:
            report.warn(f"{label}: Warning - {resolution.warning}", row, code)
        teacher_id = resolution.teacher_id

    record.update(section=section, teacher_id=teacher_id, created_by=context.user_id)
    try:
        store.insert("courses", record)
    except StoreError as e:
        logger.warning("Could not create %s: %s", label, e)
        report.fail(f"{label}: {e}", row, code)
        return

    report.success += 1
    logger.debug("Created %s", label)

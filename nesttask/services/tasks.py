from __future__ import annotations

import logging
from datetime import date

from ..errors import NotFoundError, PermissionDenied, ValidationError
from ..mappers import TASK_FIELDS, changes_from_payload, task_from_row
from ..models.task import TASK_CATEGORIES, TASK_STATUSES
from ..permissions import ADMIN, ROLES, SECTION_ADMIN, SUPER_ADMIN, check_role, require
from ..store import any_of, eq

logger = logging.getLogger(__name__)

TASK_ADMINS = (ADMIN, SUPER_ADMIN, SECTION_ADMIN)


def is_overdue(task, today=None):
    """True when the task is past its due date and not completed.

    ``task`` may be a stored row or a task entity.
    """
    today = today or date.today()
    due = task.get("due_date") or task.get("dueDate")
    if due is None:
        return False
    return task.get("status") != "completed" and _parse_due(due) < today


def _parse_due(value):
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except (TypeError, ValueError):
        raise ValidationError(f"dueDate must be an ISO date, got {value!r}") from None


def _clean(changes):
    if "name" in changes and not (changes["name"] or "").strip():
        raise ValidationError("Task name is required")
    if "category" in changes and changes["category"] not in TASK_CATEGORIES:
        raise ValidationError(f"Unknown task category: {changes['category']!r}")
    if "status" in changes and changes["status"] not in TASK_STATUSES:
        raise ValidationError(f"Unknown task status: {changes['status']!r}")
    if "due_date" in changes:
        changes["due_date"] = _parse_due(changes["due_date"])
    return changes


def _entity(row):
    task = task_from_row(row)
    task["isOverdue"] = is_overdue(row)
    return task


def _newest_first(rows):
    return sorted(rows, key=lambda r: r["created_at"], reverse=True)


def fetch_tasks(store, context):
    """Tasks visible to the caller: everything for admins, the section for section admins."""
    require(check_role(context.role if context else None, ROLES), "sign in to see tasks")

    if context.role in (ADMIN, SUPER_ADMIN):
        rows = store.select("tasks", order_by="created_at", descending=True)
        return [_entity(r) for r in rows]

    if context.role == SECTION_ADMIN and context.section_id:
        found = {r["id"]: r for r in store.select("tasks", eq("section_id", context.section_id))}
        members = [u["id"] for u in store.select("users", eq("section_id", context.section_id))]
        if members:
            for r in store.select("tasks", any_of("created_by", members)):
                found.setdefault(r["id"], r)
        return [_entity(r) for r in _newest_first(found.values())]

    found = {r["id"]: r for r in store.select("tasks", eq("created_by", context.user_id))}
    for r in store.select("tasks", eq("is_admin_task", True)):
        if r["section_id"] in (None, context.section_id):
            found.setdefault(r["id"], r)
    return [_entity(r) for r in _newest_first(found.values())]


def create_task(store, payload, context, section_id=None):
    require(check_role(context.role if context else None, ROLES), "sign in to create tasks")
    record = changes_from_payload(payload, TASK_FIELDS)
    record.setdefault("category", "task")
    record.setdefault("status", "my-tasks")
    if "name" not in record or "due_date" not in record:
        raise ValidationError("Task name and dueDate are required")
    _clean(record)

    is_admin = context.role in TASK_ADMINS
    if context.role == SECTION_ADMIN:
        section_id = context.section_id
    elif not is_admin:
        section_id = None
    record.update(is_admin_task=is_admin, section_id=section_id, created_by=context.user_id)
    logger.info("Creating task %r as %s (section=%s)", record["name"], context.role, section_id)
    return _entity(store.insert("tasks", record))


def _owned_task(store, task_id, context):
    require(check_role(context.role if context else None, ROLES), "sign in to change tasks")
    row = store.select_one_or_none("tasks", eq("id", task_id))
    if row is None:
        return None
    if context.role in (ADMIN, SUPER_ADMIN) or row["created_by"] == context.user_id:
        return row
    if context.role == SECTION_ADMIN and row["section_id"] == context.section_id:
        return row
    raise PermissionDenied("Permission denied: this task belongs to someone else")


def update_task(store, task_id, payload, context):
    if _owned_task(store, task_id, context) is None:
        raise NotFoundError("Task not found")
    row = store.update("tasks", [eq("id", task_id)], _clean(changes_from_payload(payload, TASK_FIELDS)))
    if row is None:
        raise NotFoundError("Task not found")
    return _entity(row)


def delete_task(store, task_id, context):
    if _owned_task(store, task_id, context) is None:
        return False
    return store.delete("tasks", eq("id", task_id)) > 0

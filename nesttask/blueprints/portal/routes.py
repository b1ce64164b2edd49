from flask import request, jsonify, abort
from flask_login import login_required
from ...permissions import current_authorization
from ...services import courses as course_service
from ...services import tasks as task_service
from ...services import teachers as teacher_service
from ...store import Store
from . import bp

@bp.get("/courses")
@login_required
def courses():
    return jsonify(course_service.fetch_courses(Store()))

@bp.get("/courses/<cid>")
@login_required
def course(cid):
    return jsonify(course_service.get_course(Store(), cid))

@bp.get("/materials")
@login_required
def materials():
    items = course_service.fetch_study_materials(Store())
    course_id = (request.args.get("course") or "").strip()
    if course_id:
        items = [m for m in items if m["courseId"] == course_id]
    return jsonify(items)

@bp.get("/teachers")
@login_required
def teachers():
    return jsonify(teacher_service.fetch_teachers(Store()))

# ---------- Tasks ----------
@bp.get("/tasks")
@login_required
def tasks():
    items = task_service.fetch_tasks(Store(), current_authorization())
    category = request.args.get("category", "all")
    if category != "all":
        items = [t for t in items if t["category"] == category]
    return jsonify(items)

@bp.post("/tasks")
@login_required
def create_task():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description="Expected a JSON object")
    task = task_service.create_task(Store(), data, current_authorization(),
                                    section_id=data.get("sectionId"))
    return jsonify(task), 201

@bp.patch("/tasks/<task_id>")
@login_required
def update_task(task_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description="Expected a JSON object")
    return jsonify(task_service.update_task(Store(), task_id, data, current_authorization()))

@bp.delete("/tasks/<task_id>")
@login_required
def delete_task(task_id):
    if not task_service.delete_task(Store(), task_id, current_authorization()):
        abort(404, description="Task not found")
    return "", 204

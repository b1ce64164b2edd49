from flask import request, jsonify, current_app, abort
from flask_login import login_required
from ..auth.routes import role_required
from ...mappers import candidate_from_payload, course_payloads
from ...permissions import ADMIN, SECTION_ADMIN, current_authorization
from ...services import courses as course_service
from ...services import teachers as teacher_service
from ...services.importer import bulk_import_courses
from ...store import Store
from . import bp

def payload():
    data = request.get_json(silent=True)
    if data is None:
        abort(400, description="Expected a JSON body")
    return data

# ---------- Courses ----------
@bp.post("/courses")
@login_required
@role_required(ADMIN, SECTION_ADMIN)
def create_course():
    course = course_service.create_course(Store(), candidate_from_payload(payload()),
                                          current_authorization())
    return jsonify(course), 201

@bp.patch("/courses/<cid>")
@login_required
@role_required(ADMIN, SECTION_ADMIN)
def update_course(cid):
    return jsonify(course_service.update_course(Store(), cid, payload(), current_authorization()))

@bp.delete("/courses/<cid>")
@login_required
@role_required(ADMIN, SECTION_ADMIN)
def delete_course(cid):
    if not course_service.delete_course(Store(), cid, current_authorization()):
        abort(404, description="Course does not exist")
    return "", 204

@bp.post("/courses/import")
@login_required
def import_courses():
    # role is checked by the pipeline so the caller always gets a report
    report = bulk_import_courses(
        Store(), course_payloads(payload()), current_authorization(),
        placeholder_phone=current_app.config["TEACHER_PHONE_PLACEHOLDER"],
    )
    return jsonify(report.to_dict()), 403 if report.aborted else 200

# ---------- Study materials ----------
@bp.post("/materials")
@login_required
@role_required(ADMIN, SECTION_ADMIN)
def create_material():
    return jsonify(course_service.create_study_material(Store(), payload(), current_authorization())), 201

@bp.patch("/materials/<mid>")
@login_required
@role_required(ADMIN, SECTION_ADMIN)
def update_material(mid):
    return jsonify(course_service.update_study_material(Store(), mid, payload(), current_authorization()))

@bp.delete("/materials/<mid>")
@login_required
@role_required(ADMIN, SECTION_ADMIN)
def delete_material(mid):
    if not course_service.delete_study_material(Store(), mid, current_authorization()):
        abort(404, description="Study material does not exist")
    return "", 204

# ---------- Teachers ----------
@bp.post("/teachers")
@login_required
@role_required(ADMIN, SECTION_ADMIN)
def create_teacher():
    return jsonify(teacher_service.create_teacher(Store(), payload(), current_authorization())), 201

@bp.patch("/teachers/<tid>")
@login_required
@role_required(ADMIN, SECTION_ADMIN)
def update_teacher(tid):
    return jsonify(teacher_service.update_teacher(Store(), tid, payload(), current_authorization()))

@bp.delete("/teachers/<tid>")
@login_required
@role_required(ADMIN, SECTION_ADMIN)
def delete_teacher(tid):
    if not teacher_service.delete_teacher(Store(), tid, current_authorization()):
        abort(404, description="Teacher not found")
    return "", 204

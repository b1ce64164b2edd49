from flask import request, jsonify, abort
from werkzeug.security import check_password_hash
from flask_login import login_user, logout_user, login_required, current_user
from ...models.user import User
from ...mappers import user_from_row
from ...store import serialize
from . import bp
from functools import wraps

def role_required(*roles):
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated or current_user.role not in roles:
                abort(403)
            return f(*args, **kwargs)
        return wrapper
    return deco

@bp.post("/login")
def login():
    data = request.get_json(silent=True) or request.form
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    u = User.query.filter_by(username=username).one_or_none()
    if not (u and check_password_hash(u.password_hash, password)):
        return jsonify(error="Incorrect username or password"), 401
    login_user(u, remember=bool(data.get("remember")))
    return jsonify(user_from_row(serialize(u)))

@bp.get("/logout")
@login_required
def logout():
    logout_user()
    return jsonify(ok=True)

@bp.get("/me")
@login_required
def me():
    return jsonify(user_from_row(serialize(current_user._get_current_object())))

import logging
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from .extensions import db, migrate, login_manager
from .errors import NestTaskError

def register_error_handlers(app):
    @app.errorhandler(NestTaskError)
    def handle_nesttask_error(e):
        return jsonify(error=str(e)), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify(error=e.description), e.code

def configure_logging(app):
    level = app.config.get("LOG_LEVEL", "INFO")
    logger = logging.getLogger(__name__)
    logger.setLevel(level)
    if not logging.getLogger().handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")

def create_app(config_object="config.Config"):
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    from . import models
    from .models.user import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify(error="Authentication required"), 401

    from .blueprints.auth import bp as auth_bp
    from .blueprints.admin import bp as admin_bp
    from .blueprints.portal import bp as portal_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(portal_bp, url_prefix="/portal")
    register_error_handlers(app)

    from .cli import register_commands
    register_commands(app)

    if app.config.get("CREATE_TABLES"):
        with app.app_context():
            db.create_all()

    return app

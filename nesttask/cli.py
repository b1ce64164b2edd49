"""
Flask CLI commands::

    flask --app nesttask create-user alice --role admin
    flask --app nesttask import-courses courses.json --as alice
"""
import json

import click
from flask import current_app
from flask.cli import with_appcontext
from werkzeug.security import generate_password_hash

from .errors import NestTaskError
from .mappers import course_payloads
from .models.user import User
from .permissions import ROLES, AuthorizationContext
from .services.importer import bulk_import_courses
from .store import Store


@click.command("create-user")
@click.argument("username")
@click.option("--role", type=click.Choice(ROLES), default="user", show_default=True)
@click.option("--section", default=None, help="Section id for section admins and students.")
@click.option("--name", default=None)
@click.option("--password", default=None, help="Defaults to the configured DEFAULT_PASSWORD.")
@with_appcontext
def create_user_command(username, role, section, name, password):
    """Create a portal account."""
    password = password or current_app.config["DEFAULT_PASSWORD"]
    try:
        row = Store().insert("users", {
            "username": username,
            "password_hash": generate_password_hash(password),
            "name": name,
            "role": role,
            "section_id": section,
        })
    except NestTaskError as e:
        raise click.ClickException(f"Could not create user: {e}") from e
    click.echo(f"Created {role} {username} ({row['id']})")


@click.command("import-courses")
@click.argument("path", type=click.File("r", encoding="utf-8"))
@click.option("--as", "username", required=True, help="Account whose role and section apply.")
@with_appcontext
def import_courses_command(path, username):
    """Bulk import courses from a JSON file (a list of course objects)."""
    user = User.query.filter_by(username=username).one_or_none()
    if user is None:
        raise click.ClickException(f"No such user: {username}")
    try:
        candidates = course_payloads(json.load(path))
    except (ValueError, NestTaskError) as e:
        raise click.ClickException(f"Invalid import file: {e}") from e

    report = bulk_import_courses(
        Store(), candidates, AuthorizationContext.from_user(user),
        placeholder_phone=current_app.config["TEACHER_PHONE_PLACEHOLDER"],
    )
    for outcome in report.errors:
        prefix = "warning" if outcome.warning else "error"
        click.echo(f"{prefix}: {outcome.message}", err=not outcome.warning)
    click.echo(f"Imported {report.success} of {len(candidates)} courses")
    if report.hard_errors:
        click.get_current_context().exit(1)


def register_commands(app):
    app.cli.add_command(create_user_command)
    app.cli.add_command(import_courses_command)

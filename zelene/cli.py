import click
from flask.cli import with_appcontext
from sqlalchemy import func, or_

from zelene.extensions import db
from zelene.models.user import ROLE_CHOICES, ROLE_MEMBER, ROLE_TENANT_ADMIN, User


def _exists(username: str, email: str) -> bool:
    return db.session.query(User).filter(
        or_(User.username == username, func.lower(User.email) == email.lower())
    ).count() > 0


def _create(username, email, password, name, role) -> User:
    if _exists(username, email):
        raise click.ClickException("Username or email already exists")
    user = User(username=username, email=email.lower(), name=name, role=role, is_active=True)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


@click.group()
def bootstrap():
    """Bootstrap helpers."""


@bootstrap.command("tenant-admin")
@click.option("--username", required=True)
@click.option("--email", required=True)
@click.option("--password", required=True)
@click.option("--name", default=None)
@with_appcontext
def bootstrap_tenant_admin(username, email, password, name):
    # Only the very first tenant admin is created this way
    if db.session.query(User).filter_by(role=ROLE_TENANT_ADMIN).count():
        raise click.ClickException("A TENANT_ADMIN already exists")
    user = _create(username, email, password, name, ROLE_TENANT_ADMIN)
    click.echo(f"Bootstrap complete: tenant_admin_id={user.id} username={user.username}")


@click.group()
def users():
    """User management."""


@users.command("create")
@click.option("--username", required=True)
@click.option("--email", required=True)
@click.option("--password", required=True)
@click.option("--name", default=None)
@click.option("--role", type=click.Choice(ROLE_CHOICES), default=ROLE_MEMBER)
@with_appcontext
def users_create(username, email, password, name, role):
    user = _create(username, email, password, name, role)
    click.echo(f"User created id={user.id} username={user.username} role={user.role}")


@users.command("promote")
@click.option("--username", required=True)
@click.option("--role", type=click.Choice(ROLE_CHOICES), required=True)
@with_appcontext
def users_promote(username, role):
    user = db.session.query(User).filter_by(username=username).one_or_none()
    if not user:
        raise click.ClickException(f"User {username} not found")
    old = user.role
    user.role = role
    db.session.commit()
    click.echo(f"User {user.username}: {old} -> {role}")


def register_cli(app):
    app.cli.add_command(bootstrap)
    app.cli.add_command(users)

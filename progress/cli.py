import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db
from .models import User


@click.command("init-db")
@with_appcontext
def init_db():
    """Create the relational tables (users)."""
    db.create_all()
    click.echo("Database initialised.")


@click.command("create-user")
@click.argument("email")
@click.argument("password")
@click.option("--name", "display_name", default=None, help="Display name")
@click.option("--phone", "phone_number", default=None, help="Phone number")
@with_appcontext
def create_user(email, password, display_name, phone_number):
    """Create a user account from the command line."""
    email = email.strip().lower()
    if User.query.filter_by(email=email).first() is not None:
        raise click.ClickException("User already exists with this email")
    user = User(email=email, display_name=display_name, phone_number=phone_number)
    user.set_password(password)
    try:
        db.session.add(user)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception("create-user failed")
        raise click.ClickException(f"Failed to create user: {e}")
    click.echo(f"User {user.id} created.")


def register_cli(app):
    app.cli.add_command(init_db)
    app.cli.add_command(create_user)

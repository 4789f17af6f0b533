# menuplanner/cli.py
import click

from menuplanner.errors import DataAccessError
from menuplanner.extensions import db
from menuplanner.services import AuthService, connection_scope


def register_commands(app):

    @app.cli.command('init-db')
    def init_db():
        """Create every table that does not exist yet."""
        db.create_all()
        click.echo("Database initialized.")

    @app.cli.command('create-admin')
    @click.argument('username')
    @click.argument('name')
    @click.password_option()
    def create_admin(username, name, password):
        """Create an admin user."""
        try:
            with connection_scope() as session:
                result = AuthService.create_user(session, name, username, password, admin=True)
        except DataAccessError as err:
            raise click.ClickException(f"User not created: {err.message}")
        click.echo(f"User {result.data['username']} created.")

"""
Flask CLI commands: `flask --app campus_events.app init-db | seed-categories | create-admin`.
"""

import click

from campus_events.errors import ApiError
from campus_events.extensions import db
from campus_events.services import category_service, user_service


def register_commands(app):
    @app.cli.command('init-db')
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo('Database initialised')

    @app.cli.command('seed-categories')
    @click.option('-d', '--destroy', is_flag=True, help='Delete categories without re-seeding.')
    def seed_categories(destroy):
        """Replace categories with the default set."""
        count = category_service.seed_categories(destroy_only=destroy)
        click.echo('Categories Destroyed!' if destroy else f'Categories Imported! ({count})')

    @app.cli.command('create-admin')
    @click.argument('email')
    @click.argument('name')
    @click.password_option()
    def create_admin(email, name, password):
        """Create an administrator account."""
        try:
            user = user_service.create_admin(name, email, password)
        except ApiError as e:
            raise click.ClickException(e.message)
        click.echo(f'Admin created: {user.user_id}')

"""
Command line helpers, available as ``flask --app app <command>``.
"""

import click
from flask.cli import with_appcontext

from familynews.extensions import db
from familynews.models import User


@click.command('make-admin')
@click.argument('email')
@click.option('--name', default='Administrator', help='Display name for a new account.')
@click.option('--password', default=None, help='Password for a new account.')
@with_appcontext
def make_admin_command(email, name, password):
    """Grant admin rights to EMAIL, creating the account if --password is given."""
    email = email.strip().lower()
    user = User.query.filter_by(email=email).first()

    if user is None:
        if not password:
            raise click.ClickException(f'No user {email}; pass --password to create one.')
        user = User(name=name, email=email, is_admin=True)
        user.set_password(password)
        db.session.add(user)
        click.echo('New admin user created')
    else:
        user.is_admin = True
        click.echo('Existing user promoted to admin')

    db.session.commit()

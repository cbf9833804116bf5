from flask.cli import with_appcontext

from corpsite.extensions import db
from corpsite.services.auth import AuthService

import click

@click.command("reset-admin-password")
@click.argument("email")
@click.argument("password")
@with_appcontext
def reset_admin_password(email, password):
    """Reset an admin's password (creates the admin if missing)."""
    if len(password) < 6:
        raise click.BadParameter("Password must be at least 6 characters", param_hint="PASSWORD")
    user = AuthService(db.session).set_admin_password(email, password)
    click.echo(f"✅ Password reset for {user.email} (role: {user.role})")

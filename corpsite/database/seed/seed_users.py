import os

import click

from corpsite.extensions import db
from corpsite.models import User
from corpsite.services.auth import AuthService


def seed():
    click.echo("🌱 Seeding users...")

    email = os.getenv("ADMIN_EMAIL", "admin@example.com")
    password = os.getenv("ADMIN_PASSWORD", "admin123")

    # prevent duplicates
    admin = User.query.filter_by(email=email).first()
    if admin is None:
        admin = User(
            name="Site Admin",
            email=email,
            password=AuthService.hash_password(password),
            role="admin",
        )
        db.session.add(admin)
        db.session.commit()
        click.echo(f"✅ Admin {email} created")
    else:
        click.echo(f"⚠️ Admin {email} already exists. Skipping insert.")
    return admin

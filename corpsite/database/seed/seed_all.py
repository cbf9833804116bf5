from flask.cli import with_appcontext
from corpsite.database.seed.seed_users import seed as seed_users
from corpsite.database.seed.seed_jobs import seed as seed_jobs
from corpsite.database.seed.seed_blogs import seed as seed_blogs

import click

@click.command("seed-all")
@with_appcontext
def seed_all():
    """Run all database seeders."""
    click.echo("🌱 Seeding database...")
    admin = seed_users()
    seed_jobs(admin)
    seed_blogs()
    click.echo("✅ All seeders completed!")

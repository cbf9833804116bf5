import click

from corpsite.extensions import db
from corpsite.models import Job


def seed(admin=None):
    click.echo("🌱 Seeding jobs...")

    jobs = [
        Job(
            title="Site Engineer - Structural",
            department="Engineering",
            type="Full-time",
            location="Pune, India",
            experience="3-5 years",
            salary="6-9 LPA",
            description=(
                "Supervise structural steel erection and concrete works on industrial sites, "
                "coordinate with subcontractors and keep daily progress reports."
            ),
            requirements=[
                "B.E. / B.Tech in Civil Engineering.",
                "Hands-on experience with structural drawings.",
                "Working knowledge of site safety standards.",
            ],
            status="active",
            posted_by=admin.id if admin else None,
        ),
        Job(
            title="Piping Design Intern",
            department="Design",
            type="Internship",
            location="Mumbai, India",
            experience="0-1 years",
            salary="Stipend",
            description="Assist the piping team with isometric drawings and material take-offs.",
            requirements=["Final-year mechanical engineering student.", "Basic AutoCAD skills."],
            status="draft",
            posted_by=admin.id if admin else None,
        ),
    ]

    for job in jobs:
        existing_job = Job.query.filter_by(title=job.title).first()
        if existing_job:
            click.echo(f"⚠️ Job '{job.title}' already exists. Skipping insert.")
            continue
        db.session.add(job)

    db.session.commit()
    click.echo("✅ Jobs seeded successfully!")

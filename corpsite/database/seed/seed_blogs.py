import click

from corpsite.extensions import db
from corpsite.models import Blog
from corpsite.stores import slugify


def seed():
    click.echo("🌱 Seeding blogs...")

    title = "Five Checks Before Commissioning a Piping System"
    if Blog.query.filter_by(slug=slugify(title)).first():
        click.echo(f"⚠️ Blog '{title}' already exists. Skipping insert.")
        return

    blog = Blog(
        title=title,
        slug=slugify(title),
        excerpt="A short field checklist for hydro tests, flushing and documentation.",
        content=(
            "Commissioning goes smoothly when the basics are verified first: "
            "line walks against the P&IDs, hydro test records, flushing, "
            "support and hanger checks, and a signed punch list."
        ),
        author={"name": "Engineering Desk", "email": "", "bio": "", "avatar": ""},
        featured_image={"url": "", "alt": "", "caption": ""},
        category="Piping Systems",
        reading_time=4,
        featured=True,
        seo={"metaTitle": title, "metaDescription": "", "keywords": ["piping", "commissioning"]},
    )
    blog.set_tags(["piping", "commissioning", "checklist"])
    db.session.add(blog)
    db.session.commit()
    click.echo("✅ Blogs seeded successfully!")

from datetime import datetime
import logging
import re

from corpsite.errors import ConflictError, NotFoundError
from corpsite.models import Blog, BlogTag, Comment
from corpsite.models.blog import BLOG_CATEGORIES, BLOG_STATUSES
from corpsite.services.query import ListSpec
from corpsite.validation import Validator, clean_str, split_list, to_bool, to_int
from .base import BaseStore

logger = logging.getLogger(__name__)

SLUG_CONFLICT_MESSAGE = "Blog with this slug already exists"
MAX_TAG_LENGTH = 100


def slugify(title):
    """Lowercase, collapse every non-alphanumeric run to one hyphen, trim hyphens."""
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower())
    return slug.strip("-")


def _parse_datetime(value):
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return value
        if parsed.tzinfo is not None:
            parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
        return parsed
    return value


class BlogStore(BaseStore):
    model = Blog
    not_found_message = "Blog post not found"
    conflict_message = SLUG_CONFLICT_MESSAGE
    fields = {
        "title": "title",
        "slug": "slug",
        "excerpt": "excerpt",
        "content": "content",
        "featuredImage": "featured_image",
        "author": "author",
        "category": "category",
        "tags": "tags",
        "readingTime": "reading_time",
        "featured": "featured",
        "allowComments": "allow_comments",
        "status": "status",
        "publishedAt": "published_at",
        "seo": "seo",
    }
    list_spec = ListSpec(
        search_columns=(Blog.title, Blog.excerpt, Blog.content),
        element_search=((Blog.id, BlogTag.blog_id, BlogTag.tag),),
        filter_columns={"category": Blog.category, "featured": Blog.featured, "status": Blog.status},
        filter_converters={"featured": lambda value: value == "true"},
        sort_columns={
            "publishedAt": Blog.published_at,
            "createdAt": Blog.created_at,
            "title": Blog.title,
            "views": Blog.views,
            "likes": Blog.likes,
            "readingTime": Blog.reading_time,
        },
        default_sort="publishedAt",
        tiebreaker=Blog.id,
    )

    def normalize(self, data):
        data = super().normalize(data)
        if isinstance(data.get("slug"), str):
            data["slug"] = data["slug"].lower()
        if "tags" in data:
            data["tags"] = split_list(data["tags"])
        if "readingTime" in data:
            data["readingTime"] = to_int(data["readingTime"])
        for flag in ("featured", "allowComments"):
            if flag in data:
                data[flag] = to_bool(data[flag])
        if "publishedAt" in data:
            data["publishedAt"] = _parse_datetime(data["publishedAt"])
        if isinstance(data.get("featuredImage"), dict):
            image = data["featuredImage"]
            data["featuredImage"] = {key: image.get(key) or "" for key in ("url", "alt", "caption")}
        if isinstance(data.get("author"), dict):
            author = {key: clean_str(value) for key, value in data["author"].items()}
            if isinstance(author.get("email"), str):
                author["email"] = author["email"].lower()
            data["author"] = author
        return data

    def validate(self, data, record=None):
        validator = (
            Validator(data)
            .required("title", "Blog title is required")
            .max_length("title", 200, "Title cannot exceed 200 characters")
            .required("slug", "Slug is required")
            .max_length("slug", 255, "Slug cannot exceed 255 characters")
            .required("excerpt", "Excerpt is required")
            .max_length("excerpt", 300, "Excerpt cannot exceed 300 characters")
            .required("content", "Content is required")
            .required("category", "Category is required")
            .one_of("category", BLOG_CATEGORIES, "Invalid category")
            .string_list("tags")
            .required("readingTime", "Reading time is required")
            .integer("readingTime", minimum=1, message="Reading time must be at least 1 minute")
            .boolean("featured")
            .boolean("allowComments")
            .one_of("status", BLOG_STATUSES, "Invalid status")
        )
        tags = data.get("tags")
        if isinstance(tags, list) and any(isinstance(t, str) and len(t) > MAX_TAG_LENGTH for t in tags):
            validator.fail("tags", f"Tags cannot exceed {MAX_TAG_LENGTH} characters")
        author = data.get("author")
        if not isinstance(author, dict) or not clean_str(author.get("name")):
            validator.fail("author.name", "Author name is required")
        for name in ("featuredImage", "seo"):
            if data.get(name) is not None and not isinstance(data[name], dict):
                validator.fail(name, f"{name} must be an object")
        published_at = data.get("publishedAt")
        if published_at is not None and not isinstance(published_at, datetime):
            validator.fail("publishedAt", "publishedAt must be an ISO date")
        validator.check()

        slug = data.get("slug")
        if slug:
            clash = self.query().filter(Blog.slug == slug)
            if record is not None:
                clash = clash.filter(Blog.id != record.id)
            if clash.first() is not None:
                raise ConflictError(SLUG_CONFLICT_MESSAGE)

    def _fill_slug(self, data, title):
        if not data.get("slug") and title:
            data["slug"] = slugify(title)

    def assign(self, blog, data):
        data = dict(data)
        has_tags = "tags" in data
        tags = data.pop("tags", None)
        super().assign(blog, data)
        if has_tags or blog.id is None:
            blog.set_tags(tags)
        return blog

    def create(self, data):
        data = self.normalize(data)
        self._fill_slug(data, data.get("title"))
        self.validate(data)
        blog = self.assign(Blog(), data)
        self.session.add(blog)
        self.commit()
        logger.info("Created blog %s (%s)", blog.id, blog.slug)
        return blog

    def update(self, blog_id, patch):
        blog = self.get(blog_id)
        patch = self.normalize(patch)
        if "slug" in patch:
            self._fill_slug(patch, patch.get("title") or blog.title)
        merged = {**self.to_payload(blog), **patch}
        self.validate(merged, record=blog)
        self.assign(blog, patch)
        self.commit()
        return blog

    def delete(self, blog_id):
        blog = self.get(blog_id)
        removed = self.session.query(Comment).filter(Comment.blog_id == blog.id).delete(synchronize_session=False)
        self.session.delete(blog)
        self.commit()
        logger.info("Deleted blog %s and %d comment(s)", blog_id, removed)

    # -- public reads ---------------------------------------------------

    def published(self):
        return self.query().filter(Blog.status == "published")

    def list(self, params, include_unpublished=False):
        return super().list(params, query=self.query() if include_unpublished else self.published())

    def search(self, params):
        return super().list(params, query=self.published())

    def by_category(self, category, params):
        return super().list(params, query=self.published().filter(Blog.category == category))

    def get_published_by_slug(self, slug):
        """Fetch a published post, count the view, and attach its approved comment count."""
        blog = self.published().filter(Blog.slug == slug).first()
        if blog is None:
            raise NotFoundError(self.not_found_message)
        self.increment_views(blog.id)
        comments_count = (
            self.session.query(Comment)
            .filter(Comment.blog_id == blog.id, Comment.status == "approved")
            .count()
        )
        return blog, comments_count

    def featured(self):
        return self.published().filter(Blog.featured.is_(True)).order_by(Blog.published_at.desc()).all()

    def popular(self, limit=5):
        return self.published().order_by(Blog.views.desc(), Blog.likes.desc()).limit(limit).all()

    def related(self, blog_id, limit=3):
        """Published posts in the same category sharing at least one tag."""
        blog = self.get(blog_id)
        tags = set(blog.tags or [])
        if not tags:
            return []
        candidates = (
            self.published()
            .filter(Blog.category == blog.category, Blog.id != blog.id)
            .order_by(Blog.views.desc(), Blog.published_at.desc())
        )
        related = []
        for candidate in candidates:
            if tags.intersection(candidate.tags or []):
                related.append(candidate)
                if len(related) == limit:
                    break
        return related

    # -- counters -------------------------------------------------------

    def increment_views(self, blog_id):
        return self.increment(blog_id, Blog.views)

    def like(self, blog_id):
        return self.increment(blog_id, Blog.likes)

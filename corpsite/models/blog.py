from corpsite.extensions import db
from .base import TimestampMixin, new_id, utcnow

BLOG_CATEGORIES = (
    "Structural Engineering",
    "Piping Systems",
    "Mechanical Works",
    "Electrical Systems",
    "Safety Standards",
    "Industry Insights",
    "Construction",
    "Technology",
    "Sustainability",
)
BLOG_STATUSES = ("draft", "published", "archived")


class Blog(TimestampMixin, db.Model):
    __tablename__ = "blogs"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    excerpt = db.Column(db.String(300), nullable=False)
    content = db.Column(db.Text, nullable=False)
    featured_image = db.Column(db.JSON, nullable=False, default=dict)
    author = db.Column(db.JSON, nullable=False, default=dict)
    category = db.Column(db.Enum(*BLOG_CATEGORIES, name="blog_categories"), nullable=False, index=True)
    tags = db.Column(db.JSON, nullable=False, default=list)
    reading_time = db.Column(db.Integer, nullable=False)
    views = db.Column(db.Integer, nullable=False, default=0)
    likes = db.Column(db.Integer, nullable=False, default=0)
    shares = db.Column(db.Integer, nullable=False, default=0)
    comments = db.Column(db.Integer, nullable=False, default=0)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    allow_comments = db.Column(db.Boolean, nullable=False, default=True)
    status = db.Column(db.Enum(*BLOG_STATUSES, name="blog_statuses"), nullable=False, default="published", index=True)
    published_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    seo = db.Column(db.JSON, nullable=False, default=dict)

    comment_records = db.relationship(
        "Comment", back_populates="blog", cascade="all, delete-orphan", passive_deletes=True
    )
    # one lowercased row per distinct tag; search matches these, not the JSON text
    tag_records = db.relationship("BlogTag", back_populates="blog", cascade="all, delete-orphan")

    def set_tags(self, tags):
        self.tags = list(tags or [])
        wanted = list(dict.fromkeys(tag.lower() for tag in self.tags))
        kept = {record.tag: record for record in self.tag_records if record.tag in wanted}
        self.tag_records = [kept.get(tag) or BlogTag(tag=tag) for tag in wanted]

    def __repr__(self):
        return f"<Blog {self.slug}>"


class BlogTag(db.Model):
    __tablename__ = "blog_tags"

    blog_id = db.Column(db.String(36), db.ForeignKey("blogs.id", ondelete="CASCADE"), primary_key=True)
    tag = db.Column(db.String(100), primary_key=True)

    blog = db.relationship("Blog", back_populates="tag_records")

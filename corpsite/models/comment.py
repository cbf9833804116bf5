from sqlalchemy.ext.mutable import MutableList

from corpsite.extensions import db
from .base import TimestampMixin, new_id

COMMENT_STATUSES = ("pending", "approved", "rejected")


class Comment(TimestampMixin, db.Model):
    __tablename__ = "comments"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    blog_id = db.Column(db.String(36), db.ForeignKey("blogs.id", ondelete="CASCADE"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    comment = db.Column(db.String(1000), nullable=False)
    rating = db.Column(db.Integer, nullable=False, default=5)
    status = db.Column(db.Enum(*COMMENT_STATUSES, name="comment_statuses"), nullable=False, default="approved", index=True)
    # append-only [{name, email, comment, repliedAt}]
    replies = db.Column(MutableList.as_mutable(db.JSON), nullable=False, default=list)

    blog = db.relationship("Blog", back_populates="comment_records")

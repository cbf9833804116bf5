from sqlalchemy.ext.mutable import MutableList

from corpsite.extensions import db
from .base import TimestampMixin, new_id

CONTACT_STATUSES = ("new", "read", "in-progress", "resolved", "closed")
CONTACT_PRIORITIES = ("low", "medium", "high")


class Contact(TimestampMixin, db.Model):
    __tablename__ = "contacts"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(20), nullable=False)
    company = db.Column(db.String(100))
    subject = db.Column(db.String(255), nullable=False)
    message = db.Column(db.String(2000), nullable=False)
    status = db.Column(db.Enum(*CONTACT_STATUSES, name="contact_statuses"), nullable=False, default="new", index=True)
    priority = db.Column(db.Enum(*CONTACT_PRIORITIES, name="contact_priorities"), nullable=False, default="medium")
    assigned_to = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    # append-only [{note, addedBy, addedAt}]
    notes = db.Column(MutableList.as_mutable(db.JSON), nullable=False, default=list)

    assignee = db.relationship("User")

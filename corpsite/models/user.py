from corpsite.extensions import db
from .base import TimestampMixin, new_id

ROLES = ("user", "admin")


class User(TimestampMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(*ROLES, name="user_roles"), nullable=False, default="user")
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    jobs = db.relationship("Job", back_populates="posted_by_user")

    @property
    def is_admin(self):
        return self.role == "admin"

    # for string representation
    def __repr__(self):
        return f"<User {self.email}>"

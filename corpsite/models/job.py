from corpsite.extensions import db
from .base import TimestampMixin, new_id

JOB_TYPES = ("Full-time", "Part-time", "Contract", "Internship")
JOB_STATUSES = ("active", "draft", "closed")
DEFAULT_COLOR = "from-blue-500 to-blue-600"


class Job(TimestampMixin, db.Model):
    __tablename__ = "jobs"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(100), nullable=False)
    department = db.Column(db.String(255), nullable=False)
    type = db.Column(db.Enum(*JOB_TYPES, name="job_types"), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    experience = db.Column(db.String(255), nullable=False)
    salary = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    requirements = db.Column(db.JSON, nullable=False, default=list)
    status = db.Column(db.Enum(*JOB_STATUSES, name="job_statuses"), nullable=False, default="draft", index=True)
    color = db.Column(db.String(100), nullable=False, default=DEFAULT_COLOR)
    applications = db.Column(db.Integer, nullable=False, default=0)
    posted_by = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    posted_by_user = db.relationship("User", back_populates="jobs")
    application_records = db.relationship("Application", back_populates="job", lazy="dynamic")

    def __repr__(self):
        return f"<Job {self.title} ({self.status})>"

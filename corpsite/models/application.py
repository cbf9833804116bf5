from corpsite.extensions import db
from .base import TimestampMixin, new_id

APPLICATION_STATUSES = ("new", "reviewed", "interview", "rejected", "hired")


class Application(TimestampMixin, db.Model):
    __tablename__ = "applications"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(50), nullable=False)
    position = db.Column(db.String(255), nullable=False, index=True)
    job_id = db.Column(db.String(36), db.ForeignKey("jobs.id"), nullable=False, index=True)
    experience = db.Column(db.String(255), nullable=False)
    current_company = db.Column(db.String(255))
    expected_salary = db.Column(db.String(255), nullable=False)
    notice_period = db.Column(db.String(255), nullable=False)
    # {filename, originalName, path, size}
    resume = db.Column(db.JSON, nullable=True)
    cover_letter = db.Column(db.Text)
    skills = db.Column(db.JSON, nullable=False, default=list)
    education = db.Column(db.String(255))
    status = db.Column(db.Enum(*APPLICATION_STATUSES, name="application_statuses"), nullable=False, default="new", index=True)
    notes = db.Column(db.Text)

    job = db.relationship("Job", back_populates="application_records")

    # one application per candidate per job
    __table_args__ = (
        db.UniqueConstraint("email", "job_id", name="uq_application_email_job"),
    )

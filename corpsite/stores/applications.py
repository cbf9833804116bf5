import logging
import os

from sqlalchemy.exc import IntegrityError

from corpsite.errors import ConflictError, NotFoundError, ValidationError
from corpsite.models import Application, Job
from corpsite.models.application import APPLICATION_STATUSES
from corpsite.services.query import ListSpec
from corpsite.validation import Validator, clean_str, is_blank, split_list
from .base import BaseStore
from .jobs import JobStore

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "You have already applied for this position"
JOB_UNAVAILABLE_MESSAGE = "Job not found or not active"


class ApplicationStore(BaseStore):
    model = Application
    not_found_message = "Application not found"
    conflict_message = DUPLICATE_MESSAGE
    fields = {
        "name": "name",
        "email": "email",
        "phone": "phone",
        "experience": "experience",
        "currentCompany": "current_company",
        "expectedSalary": "expected_salary",
        "noticePeriod": "notice_period",
        "coverLetter": "cover_letter",
        "skills": "skills",
        "education": "education",
        "status": "status",
        "notes": "notes",
    }
    list_spec = ListSpec(
        search_columns=(Application.name, Application.email, Application.position),
        filter_columns={
            "status": Application.status,
            "position": Application.position,
            "jobId": Application.job_id,
        },
        sort_columns={
            "createdAt": Application.created_at,
            "updatedAt": Application.updated_at,
            "name": Application.name,
            "position": Application.position,
            "status": Application.status,
        },
        default_sort="createdAt",
        tiebreaker=Application.id,
    )

    def __init__(self, session, resumes=None):
        super().__init__(session)
        self.jobs = JobStore(session)
        self.resumes = resumes

    def normalize(self, data):
        data = super().normalize(data)
        if isinstance(data.get("email"), str):
            data["email"] = data["email"].lower()
        if "skills" in data:
            data["skills"] = split_list(data["skills"])
        return data

    def validate(self, data, record=None):
        (
            Validator(data)
            .required("name", "Name is required")
            .max_length("name", 100, "Name cannot exceed 100 characters")
            .required("email", "Email is required")
            .email("email")
            .max_length("email", 255, "Email cannot exceed 255 characters")
            .required("phone", "Phone number is required")
            .max_length("phone", 50, "Phone number cannot exceed 50 characters")
            .required("experience", "Experience is required")
            .max_length("experience", 255, "Experience cannot exceed 255 characters")
            .max_length("currentCompany", 255, "Current company cannot exceed 255 characters")
            .required("expectedSalary", "Expected salary is required")
            .max_length("expectedSalary", 255, "Expected salary cannot exceed 255 characters")
            .required("noticePeriod", "Notice period is required")
            .max_length("noticePeriod", 255, "Notice period cannot exceed 255 characters")
            .max_length("education", 255, "Education cannot exceed 255 characters")
            .string_list("skills")
            .one_of("status", APPLICATION_STATUSES, "Invalid status")
            .check()
        )

    def create(self, data, resume=None):
        """Submit an application for an active job.

        The insert and the job's ``applications`` increment commit together.
        """
        job_id = clean_str(data.get("jobId"))
        data = self.normalize(data)
        data.pop("status", None)

        errors = {}
        if is_blank(job_id):
            errors["jobId"] = "Job ID is required"
        try:
            self.validate(data)
        except ValidationError as e:
            errors.update(e.errors)
        if errors:
            raise ValidationError(errors)

        job = self.query_job(job_id)
        if job is None:
            raise ValidationError({"jobId": JOB_UNAVAILABLE_MESSAGE}, message=JOB_UNAVAILABLE_MESSAGE)

        existing = self.query().filter_by(email=data["email"], job_id=job.id).first()
        if existing is not None:
            raise ConflictError(DUPLICATE_MESSAGE)

        application = self.assign(Application(job_id=job.id, position=job.title, resume=resume), data)
        self.session.add(application)
        try:
            self.session.flush()
            self.jobs.increment_applications(job.id, commit=False)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ConflictError(DUPLICATE_MESSAGE) from e

        logger.info("Application %s submitted for job %s", application.id, job.id)
        return application

    def query_job(self, job_id):
        if not job_id:
            return None
        return self.session.query(Job).filter(Job.id == job_id, Job.status == "active").first()

    def set_status(self, application_id, status):
        if status not in APPLICATION_STATUSES:
            raise ValidationError({"status": "Invalid status value"}, message="Invalid status value")
        application = self.get(application_id)
        application.status = status
        self.commit()
        return application

    def delete(self, application_id):
        application = self.get(application_id)
        resume = application.resume or {}
        if resume.get("path") and self.resumes is not None:
            self.resumes.remove(resume["path"])
        super().delete(application_id)

    def resume_file(self, application_id):
        """Return ``(absolute path, download name)`` for the stored resume."""
        application = self.session.get(Application, application_id)
        if application is None or not application.resume:
            raise NotFoundError("Resume not found")
        path = application.resume.get("path")
        if not path or not os.path.exists(path):
            raise NotFoundError("Resume file not found on server")
        return os.path.abspath(path), application.resume.get("originalName") or os.path.basename(path)

    def stats(self):
        counts = self.count_by(Application.status)
        return {
            "byStatus": [{"_id": status, "count": count} for status, count in counts.items()],
            "total": self.query().count(),
            "new": counts.get("new", 0),
        }

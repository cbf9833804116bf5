from sqlalchemy import func

from corpsite.errors import ConflictError, ValidationError
from corpsite.models import Job
from corpsite.models.job import JOB_STATUSES, JOB_TYPES
from corpsite.services.query import ListSpec
from corpsite.validation import Validator, clean_str
from .base import BaseStore


class JobStore(BaseStore):
    model = Job
    not_found_message = "Job not found"
    fields = {
        "title": "title",
        "department": "department",
        "type": "type",
        "location": "location",
        "experience": "experience",
        "salary": "salary",
        "description": "description",
        "requirements": "requirements",
        "status": "status",
        "color": "color",
    }
    list_spec = ListSpec(
        search_columns=(Job.title, Job.description, Job.department),
        filter_columns={"status": Job.status, "department": Job.department, "type": Job.type},
        sort_columns={
            "createdAt": Job.created_at,
            "updatedAt": Job.updated_at,
            "title": Job.title,
            "department": Job.department,
            "applications": Job.applications,
        },
        default_sort="createdAt",
        tiebreaker=Job.id,
    )

    def normalize(self, data):
        data = super().normalize(data)
        requirements = data.get("requirements")
        if isinstance(requirements, str):
            data["requirements"] = [requirements]
        elif isinstance(requirements, list):
            data["requirements"] = [clean_str(r) for r in requirements]
        return data

    def validate(self, data, record=None):
        (
            Validator(data)
            .required("title", "Job title is required")
            .max_length("title", 100, "Job title cannot exceed 100 characters")
            .required("department", "Department is required")
            .max_length("department", 255, "Department cannot exceed 255 characters")
            .required("type", "Job type is required")
            .one_of("type", JOB_TYPES, "Invalid job type")
            .required("location", "Location is required")
            .max_length("location", 255, "Location cannot exceed 255 characters")
            .required("experience", "Experience is required")
            .max_length("experience", 255, "Experience cannot exceed 255 characters")
            .required("salary", "Salary information is required")
            .max_length("salary", 255, "Salary cannot exceed 255 characters")
            .required("description", "Job description is required")
            .string_list("requirements", min_items=1, message="At least one requirement is required")
            .one_of("status", JOB_STATUSES, "Invalid status")
            .max_length("color", 100, "Color cannot exceed 100 characters")
            .check()
        )

    def create(self, data, posted_by=None):
        return super().create(data, posted_by=posted_by)

    def active(self):
        """Career page listing: every active job, newest first."""
        return self.query().filter(Job.status == "active").order_by(Job.created_at.desc()).all()

    def set_status(self, job_id, status):
        if status not in JOB_STATUSES:
            raise ValidationError({"status": "Invalid status value"}, message="Invalid status value")
        job = self.get(job_id)
        job.status = status
        self.commit()
        return job

    def delete(self, job_id):
        job = self.get(job_id)
        if job.application_records.count() > 0:
            raise ConflictError("Cannot delete job with existing applications")
        super().delete(job_id)

    def increment_applications(self, job_id, commit=True):
        return self.increment(job_id, Job.applications, commit=commit)

    def stats(self):
        rows = (
            self.session.query(Job.status, func.count(Job.id), func.coalesce(func.sum(Job.applications), 0))
            .group_by(Job.status)
            .all()
        )
        by_status = [
            {"_id": status, "count": count, "totalApplications": int(total)}
            for status, count, total in rows
        ]
        return {
            "byStatus": by_status,
            "total": self.query().count(),
            "active": self.query().filter(Job.status == "active").count(),
        }

from flask import Blueprint, g, request

from corpsite.extensions import db
from corpsite.guards import admin_required
from corpsite.responses import page_response, success_response
from corpsite.serializers import job_to_dict
from corpsite.services.query import ListParams
from corpsite.stores import JobStore

jobs_bp = Blueprint("jobs", __name__)


def _store():
    return JobStore(db.session)


@jobs_bp.route("/active", methods=["GET"])
def active_jobs():
    """Public career page listing."""
    jobs = _store().active()
    return success_response(data=[job_to_dict(job) for job in jobs], count=len(jobs))


@jobs_bp.route("", methods=["GET"])
@admin_required
def list_jobs():
    store = _store()
    params = ListParams.from_args(request.args, store.list_spec)
    return page_response(store.list(params), job_to_dict)


@jobs_bp.route("/stats", methods=["GET"])
@admin_required
def job_stats():
    return success_response(data=_store().stats())


@jobs_bp.route("/<job_id>", methods=["GET"])
@admin_required
def get_job(job_id):
    return success_response(data=job_to_dict(_store().get(job_id)))


@jobs_bp.route("", methods=["POST"])
@admin_required
def create_job():
    job = _store().create(request.get_json(silent=True) or {}, posted_by=g.current_user.id)
    return success_response("Job created successfully", job_to_dict(job), 201)


@jobs_bp.route("/<job_id>", methods=["PUT"])
@admin_required
def update_job(job_id):
    job = _store().update(job_id, request.get_json(silent=True) or {})
    return success_response("Job updated successfully", job_to_dict(job))


@jobs_bp.route("/<job_id>/status", methods=["PATCH"])
@admin_required
def update_job_status(job_id):
    status = (request.get_json(silent=True) or {}).get("status")
    job = _store().set_status(job_id, status)
    return success_response(f"Job status updated to {status}", job_to_dict(job))


@jobs_bp.route("/<job_id>", methods=["DELETE"])
@admin_required
def delete_job(job_id):
    _store().delete(job_id)
    return success_response("Job deleted successfully")

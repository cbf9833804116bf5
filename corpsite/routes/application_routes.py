from flask import Blueprint, current_app, request, send_file

from corpsite.errors import APIError
from corpsite.extensions import db
from corpsite.guards import admin_required
from corpsite.responses import page_response, success_response
from corpsite.serializers import application_to_dict
from corpsite.services.query import ListParams
from corpsite.services.uploads import ResumeStorage
from corpsite.stores import ApplicationStore

applications_bp = Blueprint("applications", __name__)


def _resumes():
    return ResumeStorage(current_app.config["UPLOAD_FOLDER"], current_app.config["MAX_RESUME_SIZE"])


def _store():
    return ApplicationStore(db.session, resumes=_resumes())


def _submission():
    """Multipart form (with ``resume`` file) or plain JSON body."""
    if request.mimetype == "multipart/form-data" or request.form:
        data = request.form.to_dict()
        skills = request.form.getlist("skills")
        if len(skills) > 1:
            data["skills"] = skills
        return data
    return request.get_json(silent=True) or {}


@applications_bp.route("", methods=["GET"])
@admin_required
def list_applications():
    store = _store()
    params = ListParams.from_args(request.args, store.list_spec)
    return page_response(store.list(params), application_to_dict)


@applications_bp.route("/stats", methods=["GET"])
@admin_required
def application_stats():
    return success_response(data=_store().stats())


@applications_bp.route("/<application_id>", methods=["GET"])
@admin_required
def get_application(application_id):
    return success_response(data=application_to_dict(_store().get(application_id)))


@applications_bp.route("/<application_id>/resume", methods=["GET"])
@admin_required
def download_resume(application_id):
    path, download_name = _store().resume_file(application_id)
    return send_file(path, as_attachment=True, download_name=download_name)


@applications_bp.route("", methods=["POST"])
def create_application():
    store = _store()
    data = _submission()

    resume = None
    upload = request.files.get("resume")
    if upload is not None and upload.filename:
        resume = store.resumes.save(upload)

    try:
        application = store.create(data, resume=resume)
    except APIError:
        # rejected submissions leave no file behind
        if resume is not None:
            store.resumes.remove(resume["path"])
        raise

    return success_response("Application submitted successfully", application_to_dict(application), 201)


@applications_bp.route("/<application_id>", methods=["PUT"])
@admin_required
def update_application(application_id):
    application = _store().update(application_id, request.get_json(silent=True) or {})
    return success_response("Application updated successfully", application_to_dict(application))


@applications_bp.route("/<application_id>/status", methods=["PATCH"])
@admin_required
def update_application_status(application_id):
    status = (request.get_json(silent=True) or {}).get("status")
    application = _store().set_status(application_id, status)
    return success_response(f"Application status updated to {status}", application_to_dict(application))


@applications_bp.route("/<application_id>", methods=["DELETE"])
@admin_required
def delete_application(application_id):
    _store().delete(application_id)
    return success_response("Application deleted successfully")

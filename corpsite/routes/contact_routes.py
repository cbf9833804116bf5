from flask import Blueprint, g, request

from corpsite.extensions import db
from corpsite.guards import admin_required
from corpsite.responses import page_response, success_response
from corpsite.serializers import contact_to_dict
from corpsite.services.query import ListParams
from corpsite.stores import ContactStore

contact_bp = Blueprint("contact", __name__)


def _store():
    return ContactStore(db.session)


@contact_bp.route("", methods=["POST"])
def create_contact():
    contact = _store().create(request.get_json(silent=True) or {})
    return success_response(
        "Thank you for contacting us. We will get back to you soon.",
        {"contact": contact_to_dict(contact)},
        201,
    )


@contact_bp.route("", methods=["GET"])
@admin_required
def list_contacts():
    store = _store()
    params = ListParams.from_args(request.args, store.list_spec)
    return page_response(store.list(params), contact_to_dict, message="Contacts fetched successfully")


@contact_bp.route("/stats/overview", methods=["GET"])
@admin_required
def contact_stats():
    return success_response("Stats fetched successfully", {"stats": _store().stats()})


@contact_bp.route("/bulk/status", methods=["PUT"])
@admin_required
def bulk_update_status():
    data = request.get_json(silent=True) or {}
    updated = _store().bulk_update_status(data.get("contactIds"), data.get("status"))
    return success_response("Contacts status updated successfully", {"updatedCount": updated})


@contact_bp.route("/<contact_id>", methods=["GET"])
@admin_required
def get_contact(contact_id):
    contact = _store().get_and_mark_read(contact_id)
    return success_response("Contact fetched successfully", {"contact": contact_to_dict(contact)})


@contact_bp.route("/<contact_id>", methods=["PUT"])
@admin_required
def update_contact(contact_id):
    contact = _store().update(contact_id, request.get_json(silent=True) or {}, g.current_user)
    return success_response("Contact updated successfully", {"contact": contact_to_dict(contact)})


@contact_bp.route("/<contact_id>/notes", methods=["POST"])
@admin_required
def add_note(contact_id):
    note = (request.get_json(silent=True) or {}).get("note")
    contact = _store().add_note(contact_id, note, g.current_user)
    return success_response("Note added successfully", {"contact": contact_to_dict(contact)})


@contact_bp.route("/<contact_id>", methods=["DELETE"])
@admin_required
def delete_contact(contact_id):
    _store().delete(contact_id)
    return success_response("Contact deleted successfully")

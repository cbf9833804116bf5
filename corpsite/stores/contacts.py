from datetime import timedelta
import re

from sqlalchemy import update

from corpsite.errors import ValidationError
from corpsite.models import Contact, User
from corpsite.models.base import utcnow
from corpsite.models.contact import CONTACT_PRIORITIES, CONTACT_STATUSES
from corpsite.services.query import ListSpec
from corpsite.validation import Validator, clean_str
from .base import BaseStore


class ContactStore(BaseStore):
    model = Contact
    not_found_message = "Contact inquiry not found"
    fields = {
        "name": "name",
        "email": "email",
        "phone": "phone",
        "company": "company",
        "subject": "subject",
        "message": "message",
    }
    list_spec = ListSpec(
        search_columns=(Contact.name, Contact.email, Contact.subject, Contact.message),
        filter_columns={
            "status": Contact.status,
            "priority": Contact.priority,
            "assignedTo": Contact.assigned_to,
        },
        sort_columns={
            "createdAt": Contact.created_at,
            "updatedAt": Contact.updated_at,
            "name": Contact.name,
            "status": Contact.status,
            "priority": Contact.priority,
        },
        default_sort="createdAt",
        tiebreaker=Contact.id,
    )

    def normalize(self, data):
        data = super().normalize(data)
        if isinstance(data.get("email"), str):
            data["email"] = data["email"].lower()
        if data.get("phone") is not None:
            data["phone"] = re.sub(r"[\s()-]", "", str(data["phone"]))
        return data

    def validate(self, data, record=None):
        (
            Validator(data)
            .required("name", "Name is required")
            .max_length("name", 100, "Name cannot be more than 100 characters")
            .required("email", "Email is required")
            .email("email", "Please add a valid email")
            .max_length("email", 255, "Email cannot be more than 255 characters")
            .required("phone", "Phone number is required")
            .phone("phone")
            .max_length("company", 100, "Company name cannot be more than 100 characters")
            .required("subject", "Subject is required")
            .max_length("subject", 255, "Subject cannot be more than 255 characters")
            .required("message", "Message is required")
            .max_length("message", 2000, "Message cannot be more than 2000 characters")
            .check()
        )

    def get_and_mark_read(self, contact_id):
        """Admin read; the first one flips ``isRead``."""
        contact = self.get(contact_id)
        if not contact.is_read:
            contact.is_read = True
            self.commit()
        return contact

    def update(self, contact_id, data, user):
        """Change status/priority/assignee and optionally append ``notes.note``."""
        contact = self.get(contact_id)
        validator = Validator(data).one_of("status", CONTACT_STATUSES, "Invalid status").one_of(
            "priority", CONTACT_PRIORITIES, "Invalid priority"
        )
        assigned_to = data.get("assignedTo")
        if assigned_to and self.session.get(User, assigned_to) is None:
            validator.fail("assignedTo", "Assigned user not found")
        validator.check()

        if data.get("status"):
            contact.status = data["status"]
        if data.get("priority"):
            contact.priority = data["priority"]
        if assigned_to:
            contact.assigned_to = assigned_to

        notes = data.get("notes")
        if isinstance(notes, dict) and clean_str(notes.get("note")):
            contact.notes.append(self._note(notes["note"], user))

        self.commit()
        return contact

    def add_note(self, contact_id, note, user):
        note = clean_str(note)
        if not note:
            raise ValidationError({"note": "Note is required"}, message="Note is required")
        contact = self.get(contact_id)
        contact.notes.append(self._note(note, user))
        self.commit()
        return contact

    def _note(self, note, user):
        return {"note": clean_str(note), "addedBy": user.id, "addedByName": user.name, "addedAt": utcnow().isoformat()}

    def bulk_update_status(self, contact_ids, status):
        if not contact_ids or not isinstance(contact_ids, list) or not status:
            raise ValidationError(
                {"contactIds": "Contact IDs and status are required"},
                message="Contact IDs and status are required",
            )
        if status not in CONTACT_STATUSES:
            raise ValidationError({"status": "Invalid status"}, message="Invalid status")
        result = self.session.execute(
            update(Contact).where(Contact.id.in_(contact_ids)).values(status=status)
        )
        self.commit()
        return result.rowcount

    def stats(self, now=None):
        now = now or utcnow()
        return {
            "total": self.query().count(),
            "byStatus": self.count_by(Contact.status, CONTACT_STATUSES),
            "recent": self.query().filter(Contact.created_at >= now - timedelta(days=7)).count(),
            "unread": self.query().filter(Contact.is_read.is_(False)).count(),
            "highPriority": self.query().filter(Contact.priority == "high").count(),
        }

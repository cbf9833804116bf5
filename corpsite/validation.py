"""Field validation that reports every failing field at once."""

import re

from .errors import ValidationError

EMAIL_RE = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
PHONE_RE = re.compile(r"^\+?[1-9]\d{0,15}$")


def clean_str(value):
    if isinstance(value, str):
        return value.strip()
    return value


def is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


class Validator:
    """Collects ``field -> message`` errors over a payload dict.

    Checks after the first failure on the same field are skipped, so each
    field reports its most basic problem.
    """

    def __init__(self, data):
        self.data = data
        self.errors = {}

    def _skip(self, field):
        return field in self.errors or is_blank(self.data.get(field))

    def fail(self, field, message):
        self.errors.setdefault(field, message)

    def required(self, field, message=None):
        if is_blank(self.data.get(field)):
            self.fail(field, message or f"{field} is required")
        return self

    def max_length(self, field, limit, message=None):
        if not self._skip(field) and len(str(self.data[field])) > limit:
            self.fail(field, message or f"{field} cannot exceed {limit} characters")
        return self

    def one_of(self, field, choices, message=None):
        if not self._skip(field) and self.data[field] not in choices:
            self.fail(field, message or f"Invalid {field}")
        return self

    def email(self, field, message="Please enter a valid email"):
        if not self._skip(field) and not EMAIL_RE.match(str(self.data[field])):
            self.fail(field, message)
        return self

    def phone(self, field, message="Please add a valid phone number"):
        if not self._skip(field) and not PHONE_RE.match(str(self.data[field])):
            self.fail(field, message)
        return self

    def integer(self, field, minimum=None, maximum=None, message=None):
        if self._skip(field):
            return self
        value = self.data[field]
        if isinstance(value, bool) or not isinstance(value, int):
            self.fail(field, message or f"{field} must be an integer")
        elif minimum is not None and value < minimum:
            self.fail(field, message or f"{field} must be at least {minimum}")
        elif maximum is not None and value > maximum:
            self.fail(field, message or f"{field} must be at most {maximum}")
        return self

    def boolean(self, field):
        if not self._skip(field) and not isinstance(self.data[field], bool):
            self.fail(field, f"{field} must be true or false")
        return self

    def string_list(self, field, min_items=0, message=None):
        value = self.data.get(field)
        if value is None:
            value = []
        if not isinstance(value, list) or any(not isinstance(v, str) or not v.strip() for v in value):
            self.fail(field, f"{field} must be a list of non-empty strings")
        elif len(value) < min_items:
            self.fail(field, message or f"{field} must have at least {min_items} item(s)")
        return self

    def check(self):
        if self.errors:
            raise ValidationError(self.errors)


def to_int(value):
    """Coerce form/JSON numbers such as ``"5"`` to int; leaves bad values for the validator."""
    if isinstance(value, str) and re.fullmatch(r"-?\d+", value.strip()):
        return int(value.strip())
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def to_bool(value):
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return value


def split_list(value):
    """Accept a list, a comma separated string, or nothing."""
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, list):
        return [clean_str(v) for v in value]
    return value

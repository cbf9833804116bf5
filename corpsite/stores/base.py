import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from corpsite.errors import ConflictError, NotFoundError
from corpsite.services.query import paginate
from corpsite.validation import clean_str

logger = logging.getLogger(__name__)


class BaseStore:
    """Persistence and validation boundary for one entity type.

    Subclasses set ``model``, ``fields`` (public camelCase name -> model
    attribute), ``list_spec`` and override ``normalize``/``validate``.
    ``update`` merges the patch over the stored record and re-validates the
    whole thing, so a bad earlier write cannot slip through.
    """

    model = None
    fields = {}
    list_spec = None
    not_found_message = "Record not found"
    conflict_message = "Duplicate value violates a unique constraint"

    def __init__(self, session):
        self.session = session

    # -- helpers --------------------------------------------------------

    def normalize(self, data):
        return {key: clean_str(value) for key, value in data.items() if key in self.fields}

    def validate(self, data, record=None):
        pass

    def to_payload(self, record):
        return {name: getattr(record, attr) for name, attr in self.fields.items()}

    def assign(self, record, data):
        for name, value in data.items():
            setattr(record, self.fields[name], value)
        return record

    def commit(self):
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("Integrity error on %s: %s", self.model.__tablename__, e.orig)
            raise ConflictError(self.conflict_message) from e

    def query(self):
        return self.session.query(self.model)

    # -- CRUD -----------------------------------------------------------

    def get(self, record_id):
        record = self.session.get(self.model, record_id)
        if record is None:
            raise NotFoundError(self.not_found_message)
        return record

    def list(self, params, query=None):
        return paginate(query if query is not None else self.query(), self.list_spec, params)

    def create(self, data, **attrs):
        data = self.normalize(data)
        self.validate(data)
        record = self.assign(self.model(**attrs), data)
        self.session.add(record)
        self.commit()
        logger.info("Created %s %s", self.model.__name__, record.id)
        return record

    def update(self, record_id, patch):
        record = self.get(record_id)
        patch = self.normalize(patch)
        merged = {**self.to_payload(record), **patch}
        self.validate(merged, record=record)
        self.assign(record, patch)
        self.commit()
        return record

    def delete(self, record_id):
        record = self.get(record_id)
        self.session.delete(record)
        self.commit()
        logger.info("Deleted %s %s", self.model.__name__, record_id)

    # -- counters -------------------------------------------------------

    def increment(self, record_id, column, amount=1, commit=True):
        """Atomic ``SET column = column + amount``; returns the new value."""
        result = self.session.execute(
            update(self.model)
            .where(self.model.id == record_id)
            .values({column: column + amount})
        )
        if result.rowcount == 0:
            self.session.rollback()
            raise NotFoundError(self.not_found_message)
        if commit:
            self.commit()
        return self.session.execute(select(column).where(self.model.id == record_id)).scalar_one()

    def count_by(self, column, choices=(), query=None):
        """``{value: count}`` over ``column``, zero-filled for ``choices``."""
        query = query if query is not None else self.session.query(self.model)
        counts = {value: 0 for value in choices}
        rows = query.with_entities(column, func.count(self.model.id)).group_by(column).all()
        for value, count in rows:
            counts[value] = count
        return counts

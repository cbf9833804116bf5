"""Query Builder: request parameters -> filter, ordering and page window.

Every listing endpoint describes what it can search, filter and sort with a
``ListSpec``; the request side is parsed into a ``ListParams``. Nothing here
touches the database until ``paginate`` runs the finished query.
"""

from dataclasses import dataclass, field
import math
from typing import Any, Callable, Dict, Optional, Tuple

from sqlalchemy import or_, select

from corpsite.errors import ValidationError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# OFFSET is bound as a signed 64-bit integer
MAX_OFFSET = 2 ** 63 - 1
ALL = "all"


@dataclass
class ListSpec:
    """What one entity listing supports.

    ``filter_columns`` maps a query parameter to the column it matches
    exactly; ``filter_converters`` optionally turns the raw string into the
    column's type (e.g. ``"true"`` -> ``True``). ``element_search`` holds
    ``(owner_id, link_column, value_column)`` triples for child rows such as
    tags: a record matches when any child value contains the search text.
    Child values are stored lowercased.
    """

    search_columns: Tuple[Any, ...]
    sort_columns: Dict[str, Any]
    default_sort: str
    filter_columns: Dict[str, Any] = field(default_factory=dict)
    filter_converters: Dict[str, Callable[[str], Any]] = field(default_factory=dict)
    element_search: Tuple[Tuple[Any, Any, Any], ...] = ()
    tiebreaker: Any = None


@dataclass
class ListParams:
    """Parsed listing parameters.

    page: 1-based page number, default 1.
    limit: page size, default 10, at most 100.
    search: free text, ``None`` when absent.
    sort_by: sort parameter name, ``None`` for the entity default.
    sort_order: ``"asc"`` or ``"desc"`` (default).
    filters: exact-match parameters that survived the ``"all"`` check.
    """

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: str = "desc"
    filters: Dict[str, str] = field(default_factory=dict)

    @property
    def skip(self):
        return (self.page - 1) * self.limit

    @classmethod
    def from_args(cls, args, spec, search_param="search", require_search=False):
        errors = {}
        page = _positive_int(args.get("page"), DEFAULT_PAGE, "page", errors)
        limit = _positive_int(args.get("limit"), DEFAULT_LIMIT, "limit", errors)
        if limit > MAX_LIMIT:
            limit = MAX_LIMIT
        if "page" not in errors and (page - 1) * limit > MAX_OFFSET:
            errors["page"] = "page is too large"
            page = DEFAULT_PAGE

        search = args.get(search_param)
        if search is not None:
            search = search.strip()
        if require_search and not search:
            errors[search_param] = "Search query is required"
        if not search:
            search = None

        sort_by = args.get("sortBy")
        sort_order = (args.get("sortOrder") or "desc").lower()
        sort = args.get("sort")
        if sort and not sort_by:
            sort_order = "desc" if sort.startswith("-") else "asc"
            sort_by = sort.lstrip("-+")

        filters = {}
        for name in spec.filter_columns:
            value = args.get(name)
            if value is None or value == "" or value == ALL:
                continue
            filters[name] = value

        if errors:
            raise ValidationError(errors, message="Invalid query parameters")

        return cls(
            page=page,
            limit=limit,
            search=search,
            sort_by=sort_by,
            sort_order="asc" if sort_order == "asc" else "desc",
            filters=filters,
        )


@dataclass
class Page:
    items: list
    page: int
    limit: int
    total: int

    @property
    def pages(self):
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self):
        return self.page < self.pages

    @property
    def has_prev(self):
        return self.page > 1

    def pagination(self):
        return {
            "current": self.page,
            "limit": self.limit,
            "total": self.total,
            "pages": self.pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


def _positive_int(raw, default, name, errors):
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        errors[name] = f"{name} must be a positive integer"
        return default
    if value < 1:
        errors[name] = f"{name} must be a positive integer"
        return default
    return value


def _like_pattern(text):
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def search_clause(spec, text):
    """Case-insensitive substring match over any of the listing's text fields."""
    pattern = _like_pattern(text)
    clauses = [column.ilike(pattern, escape="\\") for column in spec.search_columns]
    lowered = _like_pattern(text.lower())
    for owner_id, link_column, value_column in spec.element_search:
        matches = select(link_column).where(value_column.like(lowered, escape="\\"))
        clauses.append(owner_id.in_(matches))
    return or_(*clauses)


def apply_filters(query, spec, params):
    for name, value in params.filters.items():
        convert = spec.filter_converters.get(name)
        query = query.filter(spec.filter_columns[name] == (convert(value) if convert else value))
    if params.search:
        query = query.filter(search_clause(spec, params.search))
    return query


def ordering(spec, params):
    # unknown sort fields fall back to the entity default
    column = spec.sort_columns.get(params.sort_by) or spec.sort_columns[spec.default_sort]
    return column.asc() if params.sort_order == "asc" else column.desc()


def paginate(query, spec, params):
    """Filter, count, order and slice ``query``; returns a ``Page``."""
    query = apply_filters(query, spec, params)
    total = query.order_by(None).count()
    order = [ordering(spec, params)]
    if spec.tiebreaker is not None:
        order.append(spec.tiebreaker.asc())
    items = query.order_by(*order).offset(params.skip).limit(params.limit).all()
    return Page(items=items, page=params.page, limit=params.limit, total=total)

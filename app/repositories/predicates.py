"""
Predicate builder for listing search.

Search criteria are turned into an ordered list of typed predicates. The
same list is compiled to SQLAlchemy clauses for execution and can be
rendered to a "?"-placeholder WHERE fragment with its parameter list for
logging and inspection. Both forms follow the list order, so identical
criteria always produce identical SQL and parameters.
"""

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple, Union

from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement

from app.models.listing import Listing
from app.schemas.search import SearchCriteria

SEARCHABLE_FIELDS = frozenset({
    "is_active", "city", "rent", "gender", "furnished", "title", "description", "address",
})


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class Range:
    field: str
    op: str  # ">=" or "<="
    value: Any

    def __post_init__(self):
        if self.op not in (">=", "<="):
            raise ValueError(f"Unsupported range operator: {self.op}")


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match; % and _ in the value match literally."""

    field: str
    value: str


@dataclass(frozen=True)
class AnyOf:
    options: Tuple["Predicate", ...]


Predicate = Union[Equals, Range, Contains, AnyOf]


def build_predicates(criteria: SearchCriteria) -> List[Predicate]:
    """
    Build the predicate list for a search.

    Order is fixed: active flag, city, rent lower bound, rent upper bound,
    gender, furnished, free-text search. Absent filters are skipped.
    """
    predicates: List[Predicate] = [Equals("is_active", True)]

    if criteria.city:
        predicates.append(Contains("city", criteria.city))

    if criteria.min_rent is not None:
        predicates.append(Range("rent", ">=", criteria.min_rent))

    if criteria.max_rent is not None:
        predicates.append(Range("rent", "<=", criteria.max_rent))

    if criteria.gender:
        # Listings open to any gender match every gender filter
        predicates.append(AnyOf((Equals("gender", criteria.gender), Equals("gender", "any"))))

    if criteria.furnished is not None:
        predicates.append(Equals("furnished", criteria.furnished))

    if criteria.search:
        predicates.append(AnyOf((
            Contains("title", criteria.search),
            Contains("description", criteria.search),
            Contains("address", criteria.search),
        )))

    return predicates


def _column(field: str):
    if field not in SEARCHABLE_FIELDS:
        raise ValueError(f"Unknown listing field: {field}")
    return getattr(Listing, field)


def to_clause(predicate: Predicate) -> ColumnElement:
    """Compile one predicate to a SQLAlchemy boolean expression with bound parameters."""
    if isinstance(predicate, Equals):
        return _column(predicate.field) == predicate.value

    if isinstance(predicate, Range):
        column = _column(predicate.field)
        return column >= predicate.value if predicate.op == ">=" else column <= predicate.value

    if isinstance(predicate, Contains):
        return _column(predicate.field).icontains(predicate.value, autoescape=True)

    if isinstance(predicate, AnyOf):
        return or_(*(to_clause(option) for option in predicate.options))

    raise TypeError(f"Unsupported predicate: {predicate!r}")


def to_clauses(predicates: Sequence[Predicate]) -> List[ColumnElement]:
    return [to_clause(p) for p in predicates]


def where_clause(predicates: Sequence[Predicate]) -> ColumnElement:
    return and_(*to_clauses(predicates))


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _render_one(predicate: Predicate, params: List[Any]) -> str:
    if isinstance(predicate, Equals):
        params.append(predicate.value)
        return f"{predicate.field} = ?"

    if isinstance(predicate, Range):
        params.append(predicate.value)
        return f"{predicate.field} {predicate.op} ?"

    if isinstance(predicate, Contains):
        params.append(f"%{_escape_like(predicate.value)}%")
        return f"lower({predicate.field}) LIKE lower(?) ESCAPE '\\'"

    if isinstance(predicate, AnyOf):
        return "(" + " OR ".join(_render_one(option, params) for option in predicate.options) + ")"

    raise TypeError(f"Unsupported predicate: {predicate!r}")


def render(predicates: Sequence[Predicate]) -> Tuple[str, List[Any]]:
    """
    Render predicates as a WHERE fragment with positional placeholders.

    Returns:
        (where_text, params) where params has one entry per "?" in order
    """
    params: List[Any] = []
    parts = [_render_one(p, params) for p in predicates]
    return " AND ".join(parts), params

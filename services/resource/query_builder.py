"""
Incremental query construction.

Every column reference is resolved from a name that has already passed the
capability descriptor's allow-list; client strings are only ever bound as
parameter values, never used as identifiers.
"""
import datetime
import decimal
import logging
import operator
from typing import Any, List, Optional, Tuple

from sqlalchemy import asc, desc, or_
from sqlalchemy import inspect as sa_inspect
from sqlalchemy import types as sa_types
from sqlalchemy.orm import Query

from services.resource.capabilities import CapabilityDescriptor
from services.resource.notifications import Normalized, warning
from services.resource.params import AppliedFilter

logger = logging.getLogger(__name__)

TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
FALSE_VALUES = frozenset({"0", "false", "no", "off"})

COMPARISONS = {
    "=": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

LIKE_ESCAPE = "\\"


def mapped_column(model, name: str):
    """Model attribute for a declared name; raises if the model has no such column"""
    mapper = sa_inspect(model)
    if name not in mapper.columns:
        raise ValueError(f"{model.__name__} has no mapped column {name!r}")
    return getattr(model, name)


def escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
            .replace("%", LIKE_ESCAPE + "%")
            .replace("_", LIKE_ESCAPE + "_")
    )


def coerce_value(model, column_name: str, raw: str) -> Any:
    """Convert a query-string value to the column's Python type (ValueError when impossible)"""
    col_type = sa_inspect(model).columns[column_name].type

    if isinstance(col_type, sa_types.Boolean):
        text = raw.strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    if isinstance(col_type, sa_types.Enum):
        if col_type.enum_class is not None:
            return col_type.enum_class(raw)
        if raw not in col_type.enums:
            raise ValueError(f"not one of {col_type.enums}")
        return raw
    if isinstance(col_type, sa_types.Integer):
        return int(raw)
    if isinstance(col_type, sa_types.Float):
        return float(raw)
    if isinstance(col_type, sa_types.Numeric):
        try:
            return decimal.Decimal(raw)
        except decimal.InvalidOperation as exc:
            raise ValueError(f"not a decimal: {raw!r}") from exc
    if isinstance(col_type, sa_types.DateTime):
        return datetime.datetime.fromisoformat(raw)
    if isinstance(col_type, sa_types.Date):
        return datetime.date.fromisoformat(raw)
    return raw


def _default_predicate(model, column_name: str, op: str, raw: str):
    column = mapped_column(model, column_name)
    if op == "in":
        values = [coerce_value(model, column_name, part.strip()) for part in raw.split(",") if part.strip()]
        return column.in_(values)
    if op in ("like", "ilike"):
        pattern = f"%{escape_like(raw)}%"
        method = column.ilike if op == "ilike" else column.like
        return method(pattern, escape=LIKE_ESCAPE)
    return COMPARISONS[op](column, coerce_value(model, column_name, raw))


def apply_filter(
    query: Query,
    model,
    descriptor: CapabilityDescriptor,
    applied: Optional[AppliedFilter],
) -> Normalized[Tuple[Query, Optional[AppliedFilter]]]:
    """Apply the single active filter; returns the filter actually in effect"""
    if applied is None:
        return (query, None), []

    spec = descriptor.filter_spec(applied.field)
    if spec.resolver is not None:
        return (spec.resolver(query, applied.value), applied), []

    try:
        predicate = _default_predicate(model, descriptor.column_for(applied.field), spec.operator, applied.value)
    except ValueError:
        logger.debug("Filter value %r rejected for %s.%s", applied.value, model.__name__, applied.field)
        return (query, None), [warning(
            f"Filter value '{applied.value}' is not valid for {applied.field}, filter ignored",
            field="filter",
        )]
    return (query.filter(predicate), applied), []


def apply_search(query: Query, model, fields: List[str], term: Optional[str]) -> Query:
    """OR a case-insensitive partial match across every searchable field"""
    if not term or not fields:
        return query
    pattern = f"%{escape_like(term)}%"
    clauses = [mapped_column(model, field).ilike(pattern, escape=LIKE_ESCAPE) for field in fields]
    return query.filter(or_(*clauses))


def apply_sort(query: Query, model, column_name: str, direction: str) -> Query:
    """Order by one allow-listed column, then by primary key so pages are stable"""
    order = desc if direction == "desc" else asc
    query = query.order_by(order(mapped_column(model, column_name)))
    for pk in sa_inspect(model).primary_key:
        if pk.key != column_name:
            query = query.order_by(order(getattr(model, pk.key)))
    return query

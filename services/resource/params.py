"""
Parameter interpreter.

Each ``normalize_*`` function takes a raw, untrusted value and returns a
``(value, notifications)`` pair. None of them raise for bad client input: the
value is always usable and every correction is reported as a warning.
"""
import math
from typing import FrozenSet, List, Optional

from pydantic import BaseModel

from services.resource.capabilities import CapabilityDescriptor, EngineConfig, SORT_DIRECTIONS
from services.resource.notifications import Normalized, Notification, NotificationBag, warning
from utils.query_params import ListQueryParams, RawFilter


class AppliedFilter(BaseModel):
    field: str
    value: str

    def to_dict(self):
        return {"field": self.field, "value": self.value}


class NormalizedRequest(BaseModel):
    page: int = 1
    per_page: int = 15
    sort_column: Optional[str] = None
    sort_dir: str = "asc"
    # True only when the client sent ``sort``; drives the sort metadata
    sort_requested: bool = False
    search_term: Optional[str] = None
    applied_filter: Optional[AppliedFilter] = None


def _to_int(raw) -> Optional[int]:
    """Integer value of a numeric string (``"3"``, ``" 3 "``, ``"3.0"``), else None"""
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def normalize_page(raw: Optional[str]) -> Normalized[int]:
    if raw is None:
        return 1, []
    page = _to_int(raw)
    if page is None or page < 1:
        return 1, [warning("Invalid page number, using page 1", field="page")]
    return page, []


def normalize_per_page(raw: Optional[str], config: EngineConfig) -> Normalized[int]:
    if raw is None:
        return config.default_per_page, []
    per_page = _to_int(raw)
    if per_page is None:
        return config.default_per_page, [warning(
            f"Page size must be a positive integer. Using default value of {config.default_per_page}.",
            field="per_page",
        )]
    if per_page > config.max_per_page:
        return config.max_per_page, [warning(
            f"Page size exceeds maximum of {config.max_per_page}, using maximum {config.max_per_page}.",
            field="per_page",
        )]
    if per_page < config.min_per_page:
        return config.min_per_page, [warning(
            f"Page size below minimum of {config.min_per_page}, using minimum {config.min_per_page}.",
            field="per_page",
        )]
    return per_page, []


def normalize_sort_column(raw: Optional[str], sortable: FrozenSet[str], config: EngineConfig) -> Normalized[Optional[str]]:
    if raw is None or not raw.strip():
        return None, []
    column = raw.strip()
    if column not in sortable:
        fallback = config.default_sort_column
        return fallback, [warning(f"Sort column '{column}' not found, using default '{fallback}'", field="sort")]
    return column, []


def normalize_sort_direction(raw: Optional[str], config: EngineConfig) -> Normalized[str]:
    if raw is None:
        return config.default_sort_direction, []
    direction = raw.strip().lower()
    if direction not in SORT_DIRECTIONS:
        return "asc", [warning(f"Sort direction '{raw}' not recognized, using 'asc'", field="dir")]
    return direction, []


def normalize_search(raw: Optional[str], config: EngineConfig) -> Normalized[Optional[str]]:
    if raw is None:
        return None, []
    term = raw.strip()
    if not term:
        return None, []
    if len(term) < config.min_search_length:
        return None, [warning(
            f"Search term too short (minimum {config.min_search_length} characters), search ignored",
            field="search",
        )]
    return term, []


def _accepts_value(descriptor: CapabilityDescriptor, field: str, value: str) -> bool:
    spec = descriptor.filter_spec(field)
    if value == "" or value == "all":
        return False
    if spec.allowed_values is not None and value not in spec.allowed_values:
        return False
    return True


def normalize_filter(raw_filters: List[RawFilter], descriptor: CapabilityDescriptor) -> Normalized[Optional[AppliedFilter]]:
    """
    Single-filter policy: every accepted occurrence replaces the previous one.
    Rejected occurrences leave the current choice untouched.
    """
    applied: Optional[AppliedFilter] = None
    notes: List[Notification] = []

    for occurrence in raw_filters:
        if occurrence.parameter is not None:
            field = descriptor.field_for_parameter(occurrence.parameter)
            value = occurrence.raw.strip()
        else:
            if ":" not in occurrence.raw:
                notes.append(warning(f"Filter format {occurrence.raw} not recognized, filter ignored", field="filter"))
                continue
            field, value = (part.strip() for part in occurrence.raw.split(":", 1))

        if field is None or descriptor.filter_spec(field) is None:
            notes.append(warning(f"Invalid filter field: {field}", field="filter"))
            continue

        # values outside the declared set are dropped without a warning
        if _accepts_value(descriptor, field, value):
            applied = AppliedFilter(field=field, value=value)

    return applied, notes


def interpret(
    params: ListQueryParams,
    descriptor: CapabilityDescriptor,
    config: EngineConfig,
    bag: NotificationBag,
    mapped_columns: Optional[FrozenSet[str]] = None,
) -> NormalizedRequest:
    """Normalize everything known before the count query runs"""
    sortable = descriptor.sortable_columns(config.fallback_sortable, config.implicit_sortable, mapped_columns)
    sort_requested = params.sort is not None and bool(params.sort.strip())

    return NormalizedRequest(
        page=bag.collect(normalize_page(params.page)),
        per_page=bag.collect(normalize_per_page(params.per_page, config)),
        search_term=bag.collect(normalize_search(params.search, config)),
        applied_filter=bag.collect(normalize_filter(params.filters, descriptor)),
        sort_column=bag.collect(normalize_sort_column(params.sort, sortable, config)),
        sort_dir=bag.collect(normalize_sort_direction(params.dir, config)),
        sort_requested=sort_requested,
    )

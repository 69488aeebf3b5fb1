"""
Capability descriptors: the static declaration each resource supplies at
registration time, plus the engine-wide configuration object.

Absence of a declaration is always an explicit ``None``; nothing in the engine
probes a model for optional methods.
"""
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Names the engine reads itself; a filter may not claim them as its own parameter
RESERVED_PARAMETERS = frozenset({"page", "per_page", "sort", "dir", "search", "filter"})

SUPPORTED_OPERATORS = frozenset({"=", "!=", "<", "<=", ">", ">=", "like", "ilike", "in"})

SORT_DIRECTIONS = ("asc", "desc")


class FilterSpec(BaseModel):
    """How one filterable field maps onto the query"""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # Dedicated query-string name (``?status=active``); defaults to the field name
    parameter: Optional[str] = None
    # Mapped model attribute; defaults to the field name
    column: Optional[str] = None
    operator: str = "="
    allowed_values: Optional[Tuple[str, ...]] = None
    # resolver(query, value) -> query, replaces the default predicate
    resolver: Optional[Callable[[Any, str], Any]] = None
    label: Optional[str] = None

    @field_validator("operator")
    @classmethod
    def validate_operator(cls, v):
        op = v.lower()
        if op not in SUPPORTED_OPERATORS:
            raise ValueError(f"Unsupported filter operator: {v!r}")
        return op

    @field_validator("allowed_values", mode="before")
    @classmethod
    def coerce_allowed_values(cls, v):
        if v is None:
            return None
        return tuple(str(item) for item in v)


class ColumnSpec(BaseModel):
    """One column of the index (list) view"""

    model_config = ConfigDict(frozen=True)

    field: str
    label: str
    sortable: bool = False
    clickable: bool = False
    search: bool = False
    format: str = "text"
    align: str = Field(default="left", pattern="^(left|center|right)$")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


DEFAULT_ID_COLUMN = ColumnSpec(
    field="id", label="ID", sortable=True, clickable=True, search=False, format="text", align="left"
)


class CapabilityDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    filterable: Optional[Dict[str, FilterSpec]] = None
    searchable: Optional[Tuple[str, ...]] = None
    sortable: Optional[Tuple[str, ...]] = None
    default_sort: Optional[Tuple[str, str]] = None
    schema_template: Optional[List[Dict[str, Any]]] = None
    columns: Optional[Tuple[ColumnSpec, ...]] = None

    @field_validator("default_sort")
    @classmethod
    def validate_default_sort(cls, v):
        if v is None:
            return v
        column, direction = v
        if direction.lower() not in SORT_DIRECTIONS:
            raise ValueError(f"Default sort direction must be one of {SORT_DIRECTIONS}")
        return (column, direction.lower())

    @field_validator("schema_template")
    @classmethod
    def validate_schema_template(cls, v):
        if v is None:
            return v
        for group in v:
            if "group" not in group or "fields" not in group:
                raise ValueError("Every schema group needs 'group' and 'fields' keys")
        return v

    @model_validator(mode="after")
    def validate_filter_parameters(self):
        seen = set()
        for field in (self.filterable or {}):
            parameter = self.parameter_for(field)
            if parameter in RESERVED_PARAMETERS:
                raise ValueError(f"Filter parameter {parameter!r} collides with a reserved parameter")
            if parameter in seen:
                raise ValueError(f"Duplicate filter parameter {parameter!r}")
            seen.add(parameter)
        return self

    # ─── Filters ────────────────────────────────────────────────────────────

    @property
    def has_filters(self) -> bool:
        return bool(self.filterable)

    def parameter_for(self, field: str) -> str:
        spec = self.filterable[field]
        return spec.parameter or field

    def column_for(self, field: str) -> str:
        spec = self.filterable[field]
        return spec.column or field

    def filter_spec(self, field: str) -> Optional[FilterSpec]:
        if not self.filterable:
            return None
        return self.filterable.get(field)

    def field_for_parameter(self, parameter: str) -> Optional[str]:
        """Reverse lookup of a dedicated filter parameter"""
        for field in (self.filterable or {}):
            if self.parameter_for(field) == parameter:
                return field
        return None

    # ─── Search / sort ──────────────────────────────────────────────────────

    def declared_searchable(self) -> Optional[List[str]]:
        """Searchable fields from the explicit list or from columns flagged ``search``"""
        if self.searchable:
            return list(self.searchable)
        if self.columns:
            flagged = [c.field for c in self.columns if c.search]
            if flagged:
                return flagged
        return None

    def sortable_columns(
        self,
        fallback: Tuple[str, ...],
        implicit: Tuple[str, ...],
        mapped: Optional[FrozenSet[str]] = None,
    ) -> FrozenSet[str]:
        """Allowed sort columns, limited to ``mapped`` when the model's columns are known"""
        declared = set(self.sortable or ())
        declared.update(c.field for c in (self.columns or ()) if c.sortable)
        allowed = frozenset(declared.union(implicit)) if declared else frozenset(fallback)
        if mapped is None:
            return allowed
        return allowed & mapped


class EngineConfig(BaseModel):
    """Engine-wide defaults, built once and injected"""

    model_config = ConfigDict(frozen=True)

    default_per_page: int = 15
    max_per_page: int = 100
    min_per_page: int = 1
    min_search_length: int = 2
    default_sort_column: str = "id"
    default_sort_direction: str = "asc"
    # Always sortable when a resource declares anything sortable
    implicit_sortable: Tuple[str, ...] = ("id", "created_at")
    # Sortable set of a resource that declares nothing
    fallback_sortable: Tuple[str, ...] = ("id", "created_at", "updated_at")
    currency_prefix: str = "₹"

    @classmethod
    def from_settings(cls, settings) -> "EngineConfig":
        return cls(
            default_per_page=settings.DEFAULT_PER_PAGE,
            max_per_page=settings.MAX_PER_PAGE,
            min_per_page=settings.MIN_PER_PAGE,
            min_search_length=settings.MIN_SEARCH_LENGTH,
            default_sort_column=settings.DEFAULT_SORT_COLUMN,
            default_sort_direction=settings.DEFAULT_SORT_DIRECTION,
            currency_prefix=settings.CURRENCY_PREFIX,
        )

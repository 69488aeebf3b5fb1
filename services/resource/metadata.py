"""
Response metadata for list endpoints.

Each key follows the same precedence: what the resource declares wins, then
what can be inferred from the model, then absence. Schema and column
generation never fail a request; errors are logged and the key degrades.
"""
import logging
from typing import Any, Dict, List, Optional

from services.resource import schema_service
from services.resource.capabilities import DEFAULT_ID_COLUMN, CapabilityDescriptor, EngineConfig
from services.resource.params import AppliedFilter, NormalizedRequest

logger = logging.getLogger(__name__)


def build_filters_metadata(descriptor: CapabilityDescriptor, applied: Optional[AppliedFilter]) -> Optional[Dict[str, Any]]:
    if not descriptor.has_filters:
        return None
    available = [
        {"field": field, "value": list(spec.allowed_values or [])}
        for field, spec in descriptor.filterable.items()
    ]
    return {
        "applied": applied.to_dict() if applied is not None else None,
        "available": available,
    }


def build_search_metadata(search_term: Optional[str]) -> Optional[str]:
    return search_term


def build_sort_metadata(normalized: NormalizedRequest) -> Optional[Dict[str, str]]:
    # only echoed when the client asked for a sort
    if not normalized.sort_requested:
        return None
    return {"column": normalized.sort_column, "dir": normalized.sort_dir}


def build_schema_metadata(model, descriptor: CapabilityDescriptor, config: EngineConfig) -> Optional[List[Dict[str, Any]]]:
    try:
        if descriptor.schema_template:
            return descriptor.schema_template
        return schema_service.generate_auto_schema(model, config)
    except Exception:
        logger.exception("Error generating schema data for model %s", getattr(model, "__name__", model))
        return None


def default_columns() -> List[Dict[str, Any]]:
    return [DEFAULT_ID_COLUMN.to_dict()]


def build_columns_metadata(descriptor: CapabilityDescriptor) -> List[Dict[str, Any]]:
    try:
        if descriptor.columns:
            return [column.to_dict() for column in descriptor.columns]
    except Exception:
        logger.exception("Error generating columns data")
    return default_columns()


def compose(
    model,
    descriptor: CapabilityDescriptor,
    config: EngineConfig,
    normalized: NormalizedRequest,
    applied: Optional[AppliedFilter],
    search_term: Optional[str],
) -> Dict[str, Any]:
    return {
        "search": build_search_metadata(search_term),
        "sort": build_sort_metadata(normalized),
        "filters": build_filters_metadata(descriptor, applied),
        "schema": build_schema_metadata(model, descriptor, config),
        "columns": build_columns_metadata(descriptor),
    }

"""
Resource engine: one instance per application, shared by every request.

The engine holds no per-request state. A list request runs
interpret -> filter/search -> count -> clamp -> sort -> slice -> metadata
and always produces a success envelope unless storage itself fails.
"""
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from services.base_service import BaseService
from services.resource import metadata, pagination, query_builder, resource_logger, schema_service
from services.resource.capabilities import EngineConfig
from services.resource.errors import InternalServerError
from services.resource.notifications import NotificationBag, warning
from services.resource.params import NormalizedRequest, interpret
from services.resource.payloads import apply_column_defaults, validate_payload
from services.resource.registry import RegisteredResource
from services.resource.responses import delete_envelope, item_envelope, list_envelope
from utils.database_utils import DatabaseUtils
from utils.query_params import ListQueryParams


class ResourceEngine:
    def __init__(self, config: EngineConfig):
        self.config = config

    # ─── Helpers ────────────────────────────────────────────────────────────

    def searchable_fields(self, resource: RegisteredResource) -> List[str]:
        declared = resource.descriptor.declared_searchable()
        if declared is not None:
            return declared
        return schema_service.infer_searchable_fields(resource.model)

    def _order(self, resource: RegisteredResource, normalized: NormalizedRequest):
        if normalized.sort_requested:
            return normalized.sort_column, normalized.sort_dir
        if resource.descriptor.default_sort:
            return resource.descriptor.default_sort
        return self.config.default_sort_column, self.config.default_sort_direction

    def serialize(self, resource: RegisteredResource, obj: Any) -> Dict[str, Any]:
        return DatabaseUtils.to_dict(obj, hidden=resource.hidden_fields)

    # ─── Read paths ─────────────────────────────────────────────────────────

    def list_resources(self, db: Session, resource: RegisteredResource, params: ListQueryParams) -> Dict[str, Any]:
        model = resource.model
        descriptor = resource.descriptor
        bag = NotificationBag()
        normalized = interpret(params, descriptor, self.config, bag, resource.mapped_columns)

        search_term = normalized.search_term
        fields = self.searchable_fields(resource)
        if search_term and not fields:
            bag.add(warning("Search is not supported for this resource.", field="search"))
            search_term = None

        try:
            query = db.query(model)
            query, applied = bag.collect(query_builder.apply_filter(query, model, descriptor, normalized.applied_filter))
            query = query_builder.apply_search(query, model, fields, search_term)

            total = pagination.count_items(query)
            bounds = bag.collect(pagination.compute_bounds(total, normalized.per_page, normalized.page))

            column, direction = self._order(resource, normalized)
            query = query_builder.apply_sort(query, model, column, direction)
            items = pagination.page_slice(query, bounds)
        except SQLAlchemyError as exc:
            resource_logger.log_resource_error("list", resource.name, exc, {"params": params.model_dump()})
            raise InternalServerError("An error occurred while fetching the resources") from exc

        info = pagination.build_pagination_info(bounds, params.url_path, params.url_query)
        meta = metadata.compose(model, descriptor, self.config, normalized, applied, search_term)
        return list_envelope(
            "Resources retrieved successfully",
            [self.serialize(resource, obj) for obj in items],
            info,
            meta,
            bag,
        )

    def show(self, db: Session, resource: RegisteredResource, obj_id: Any) -> Dict[str, Any]:
        service = BaseService(db, resource.model)
        try:
            obj = service.get_by_id_or_404(obj_id)
        except SQLAlchemyError as exc:
            resource_logger.log_resource_error("show", resource.name, exc, {"id": obj_id})
            raise InternalServerError("An error occurred while fetching the resource") from exc
        return item_envelope("Resource retrieved successfully", self.serialize(resource, obj))

    def schema(self, resource: RegisteredResource) -> Dict[str, Any]:
        data = metadata.build_schema_metadata(resource.model, resource.descriptor, self.config)
        return item_envelope("Schema retrieved successfully", data)

    def columns(self, resource: RegisteredResource) -> Dict[str, Any]:
        data = metadata.build_columns_metadata(resource.descriptor)
        return item_envelope("Columns retrieved successfully", data)

    # ─── Write paths ────────────────────────────────────────────────────────

    def create(self, db: Session, resource: RegisteredResource, payload: Any) -> Dict[str, Any]:
        data = validate_payload(resource.create_schema, payload)
        data = apply_column_defaults(resource.model, data, "create")
        obj = BaseService(db, resource.model).create(data)
        return item_envelope("Resource created successfully", self.serialize(resource, obj))

    def update(self, db: Session, resource: RegisteredResource, obj_id: Any, payload: Any) -> Dict[str, Any]:
        service = BaseService(db, resource.model)
        obj = service.get_by_id_or_404(obj_id)
        data = validate_payload(resource.update_schema, payload)
        data = apply_column_defaults(resource.model, data, "update")
        obj = service.update(obj, data)
        return item_envelope("Resource updated successfully", self.serialize(resource, obj))

    def delete(self, db: Session, resource: RegisteredResource, obj_id: Any) -> Dict[str, Any]:
        service = BaseService(db, resource.model)
        obj = service.get_by_id_or_404(obj_id)
        service.delete(obj)
        return delete_envelope("Resource deleted successfully")

# api/resources/resource_controller.py
from typing import Any, Dict

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from config.settings import settings
from services.resource import resource_logger
from services.resource.capabilities import EngineConfig
from services.resource.engine import ResourceEngine
from services.resource.registry import RegisteredResource
from services.resource.responses import json_response
from utils.query_params import ListQueryParams

engine = ResourceEngine(EngineConfig.from_settings(settings))


def list_resources_controller(request: Request, db: Session, resource: RegisteredResource, user: Dict[str, Any]) -> JSONResponse:
    resource_logger.log_resource_access("list", resource.name, user.get("id"))
    params = ListQueryParams.from_request(request, resource.filter_parameters)
    return json_response(engine.list_resources(db, resource, params))


def show_resource_controller(db: Session, resource: RegisteredResource, obj_id: str, user: Dict[str, Any]) -> JSONResponse:
    resource_logger.log_resource_access("show", resource.name, user.get("id"), {"id": obj_id})
    return json_response(engine.show(db, resource, obj_id))


def create_resource_controller(db: Session, resource: RegisteredResource, payload: Any, user: Dict[str, Any]) -> JSONResponse:
    resource_logger.log_resource_access("create", resource.name, user.get("id"))
    return json_response(engine.create(db, resource, payload), status.HTTP_201_CREATED)


def update_resource_controller(db: Session, resource: RegisteredResource, obj_id: str, payload: Any, user: Dict[str, Any]) -> JSONResponse:
    resource_logger.log_resource_access("update", resource.name, user.get("id"), {"id": obj_id})
    return json_response(engine.update(db, resource, obj_id, payload))


def delete_resource_controller(db: Session, resource: RegisteredResource, obj_id: str, user: Dict[str, Any]) -> JSONResponse:
    resource_logger.log_resource_access("delete", resource.name, user.get("id"), {"id": obj_id})
    return json_response(engine.delete(db, resource, obj_id))


def schema_controller(resource: RegisteredResource) -> JSONResponse:
    return json_response(engine.schema(resource))


def columns_controller(resource: RegisteredResource) -> JSONResponse:
    return json_response(engine.columns(resource))

# api/resources/resource_routes.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session

from config.database import get_db
from config.settings import settings
from middlewares.role_middleware import role_middleware
from services.resource.registry import RegisteredResource, ResourceRegistry, registry
from api.resources.resource_controller import (
    list_resources_controller,
    show_resource_controller,
    create_resource_controller,
    update_resource_controller,
    delete_resource_controller,
    schema_controller,
    columns_controller,
)
import models.index  # noqa: F401  registers every resource


def build_resource_router(resource: RegisteredResource) -> APIRouter:
    """Seven routes for one registered resource"""
    guard = role_middleware(required_roles=list(resource.required_roles))
    router = APIRouter(prefix=f"/{resource.uri}", tags=[resource.name])

    @router.get("", summary=f"List {resource.uri} (paginated)")
    def list_endpoint(
        request: Request,
        db: Session = Depends(get_db),
        current_user: dict = Depends(guard),
    ):
        return list_resources_controller(request, db, resource, current_user)

    @router.post("", status_code=201, summary=f"Create a {resource.name}")
    def create_endpoint(
        payload: Dict[str, Any] = Body(...),
        db: Session = Depends(get_db),
        current_user: dict = Depends(guard),
    ):
        return create_resource_controller(db, resource, payload, current_user)

    # schema and columns must be registered before the /{obj_id} routes
    @router.get("/schema", summary=f"Form schema for {resource.uri}")
    def schema_endpoint(current_user: dict = Depends(guard)):
        return schema_controller(resource)

    @router.get("/columns", summary=f"Index columns for {resource.uri}")
    def columns_endpoint(current_user: dict = Depends(guard)):
        return columns_controller(resource)

    @router.get("/{obj_id}", summary=f"Get a {resource.name} by id")
    def show_endpoint(
        obj_id: str,
        db: Session = Depends(get_db),
        current_user: dict = Depends(guard),
    ):
        return show_resource_controller(db, resource, obj_id, current_user)

    @router.api_route("/{obj_id}", methods=["PUT", "PATCH"], summary=f"Update a {resource.name}")
    def update_endpoint(
        obj_id: str,
        payload: Dict[str, Any] = Body(...),
        db: Session = Depends(get_db),
        current_user: dict = Depends(guard),
    ):
        return update_resource_controller(db, resource, obj_id, payload, current_user)

    @router.delete("/{obj_id}", summary=f"Delete a {resource.name}")
    def delete_endpoint(
        obj_id: str,
        db: Session = Depends(get_db),
        current_user: dict = Depends(guard),
    ):
        return delete_resource_controller(db, resource, obj_id, current_user)

    return router


def build_router(resources: ResourceRegistry) -> APIRouter:
    api_router = APIRouter(prefix=f"/{settings.API_VERSION}")
    for resource in resources:
        api_router.include_router(build_resource_router(resource))
    return api_router


router = build_router(registry)

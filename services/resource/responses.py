"""
Response envelope builders.

Two shapes only: success and error. This module is also the single place
where an error code is turned into an HTTP status.
"""
from typing import Any, Dict, List, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from services.resource.errors import ApiError
from services.resource.notifications import NotificationBag
from services.resource.pagination import PaginationInfo

STATUS_BY_CODE = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "VALIDATION_FAILED": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "INVALID_PARAMETERS": status.HTTP_400_BAD_REQUEST,
    "METHOD_NOT_ALLOWED": status.HTTP_405_METHOD_NOT_ALLOWED,
    "INTERNAL_SERVER_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Reverse mapping for framework-raised HTTP errors
CODE_BY_STATUS = {
    status.HTTP_400_BAD_REQUEST: "INVALID_PARAMETERS",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_422_UNPROCESSABLE_ENTITY: "VALIDATION_FAILED",
}


def status_for(code: str) -> int:
    return STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def code_for_status(status_code: int) -> str:
    return CODE_BY_STATUS.get(status_code, "INTERNAL_SERVER_ERROR")


def list_envelope(
    message: str,
    data: List[Any],
    pagination: PaginationInfo,
    metadata: Dict[str, Any],
    notifications: NotificationBag,
) -> Dict[str, Any]:
    return {
        "success": True,
        "message": message,
        "data": data,
        "pagination": pagination.to_dict(),
        "search": metadata.get("search"),
        "sort": metadata.get("sort"),
        "filters": metadata.get("filters"),
        "schema": metadata.get("schema"),
        "columns": metadata.get("columns"),
        "notifications": notifications.to_list(),
    }


def item_envelope(message: str, data: Any) -> Dict[str, Any]:
    """show / create / update / schema / columns"""
    return {"success": True, "message": message, "data": data}


def delete_envelope(message: str) -> Dict[str, Any]:
    return {"success": True, "message": message}


def error_envelope(code: str, message: str, details: Optional[Any] = None) -> Dict[str, Any]:
    if not isinstance(details, (dict, list)):
        details = {}
    return {
        "success": False,
        "message": message,
        "error": {"code": code, "message": message, "details": details},
    }


def error_response(exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=status_for(exc.code),
        content=jsonable_encoder(error_envelope(exc.code, exc.message, exc.details)),
    )


def json_response(envelope: Dict[str, Any], status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(envelope))

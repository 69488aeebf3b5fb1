# services/resource/resource_logger.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger("resources")

NOT_PROVIDED = "NOT_PROVIDED"


def log_defaults_application(original: Dict[str, Any], processed: Dict[str, Any], operation: str, model_name: str) -> Dict[str, Any]:
    """Log fields whose empty value was replaced by a column default; returns them"""
    applied = {}
    for field, value in processed.items():
        before = original.get(field, NOT_PROVIDED)
        if before == value:
            continue
        if before is None or before == "" or before == NOT_PROVIDED:
            applied[field] = {"original": before, "applied_default": value}

    if applied:
        logger.info(
            "Database defaults applied during %s operation for %s: %s",
            operation, model_name, applied,
        )
    return applied


def log_resource_error(operation: str, model_name: str, exc: BaseException, context: Optional[Dict[str, Any]] = None) -> None:
    # full traceback stays in the server log, never in the response
    logger.error(
        "Resource operation failed: %s on %s: %s | context=%s",
        operation, model_name, exc, context or {},
        exc_info=exc,
    )


def log_resource_success(operation: str, model_name: str, resource_id: Any = None, context: Optional[Dict[str, Any]] = None) -> None:
    message = f"Resource operation completed: {operation} on {model_name}"
    if resource_id is not None:
        message += f" (ID: {resource_id})"
    logger.info("%s %s", message, context or "")


def log_resource_access(operation: str, model_name: str, user_id: Any = None, context: Optional[Dict[str, Any]] = None) -> None:
    logger.debug(
        "Resource accessed: %s on %s user_id=%s at=%s context=%s",
        operation, model_name, user_id, datetime.now(timezone.utc).isoformat(), context or {},
    )

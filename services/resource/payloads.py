"""
Create/update payload handling: pydantic models derived from the mapped
columns, validation into per-field error details, and column defaults.
"""
import datetime
import decimal
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, ValidationError, create_model
from sqlalchemy.sql.schema import Column

from services.resource import resource_logger
from services.resource.errors import ValidationFailedError
from services.resource.schema_service import cast_for, model_columns

PYTHON_TYPES = {
    "boolean": bool,
    "integer": int,
    "float": float,
    "decimal": decimal.Decimal,
    "datetime": datetime.datetime,
    "date": datetime.date,
    "time": datetime.time,
    "json": Any,
}


class PayloadBase(BaseModel):
    # unknown keys are dropped, never written to the model
    model_config = ConfigDict(extra="ignore")


def _python_type(column: Column):
    cast = cast_for(column)
    if cast == "enum":
        enum_class = column.type.enum_class
        return enum_class if enum_class is not None else str
    return PYTHON_TYPES.get(cast, str)


def _has_default(column: Column) -> bool:
    return column.default is not None or column.server_default is not None


def build_payload_model(model, partial: bool = False) -> Type[BaseModel]:
    """
    Pydantic model for a resource payload.
    ``partial`` builds the update variant where every field is optional.
    """
    fields = {}
    for column in model_columns(model):
        py_type = _python_type(column)
        required = not partial and not column.nullable and not _has_default(column)
        if required:
            fields[column.key] = (py_type, ...)
        else:
            fields[column.key] = (Optional[py_type], None)

    suffix = "Update" if partial else "Create"
    return create_model(f"{model.__name__}{suffix}", __base__=PayloadBase, **fields)


def validation_details(exc: ValidationError) -> Dict[str, List[str]]:
    details: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "__root__"
        details.setdefault(loc, []).append(err["msg"])
    return details


def validate_payload(schema: Type[BaseModel], payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationFailedError(details={"__root__": ["Payload must be a JSON object"]})
    try:
        validated = schema.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailedError(details=validation_details(exc)) from exc
    # only what the client sent is written; omitted columns keep their defaults
    return validated.model_dump(exclude_unset=True)


def _scalar_default(column: Column):
    default = column.default
    if default is None or not default.is_scalar:
        return None
    return default.arg


def apply_column_defaults(model, data: Dict[str, Any], operation: str) -> Dict[str, Any]:
    """Replace ``None``/empty values with the column's scalar default"""
    processed = dict(data)
    for column in model_columns(model):
        if column.key not in processed:
            continue
        value = processed[column.key]
        if value is None or value == "":
            default = _scalar_default(column)
            if default is not None:
                processed[column.key] = default
            elif column.server_default is not None:
                # let the database fill it in
                processed.pop(column.key)
    resource_logger.log_defaults_application(data, processed, operation, model.__name__)
    return processed

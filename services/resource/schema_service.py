"""
Generic type inference over a model's mapped columns.

Used whenever a resource declares no schema or no searchable fields:
field types come from the SQLAlchemy column type first and from the
attribute name second.
"""
import enum
import string
from typing import Any, Dict, List, Optional

from sqlalchemy import inspect as sa_inspect
from sqlalchemy import types as sa_types
from sqlalchemy.sql.schema import Column

from services.resource.capabilities import EngineConfig

GENERAL_GROUP = "General Information"

# Never offered as form fields
SYSTEM_COLUMNS = ("created_at", "updated_at", "deleted_at")

SEARCH_HINTS = (
    "name", "title", "description", "email", "username", "content",
    "notes", "brand", "sku", "model", "category",
)

# cast name -> form input type
CAST_INPUT_TYPES = {
    "boolean": "checkbox",
    "integer": "number",
    "float": "number",
    "decimal": "decimal",
    "datetime": "datetime-local",
    "date": "date",
    "time": "time",
    "json": "textarea",
    "enum": "select",
}

NON_TEXT_CASTS = frozenset({"boolean", "integer", "float", "decimal", "datetime", "date", "time", "json", "enum"})


def model_columns(model) -> List[Column]:
    """Mapped columns a client may write: no primary keys, no bookkeeping timestamps"""
    mapper = sa_inspect(model)
    return [
        col for col in mapper.columns
        if not col.primary_key and col.key not in SYSTEM_COLUMNS
    ]


def cast_for(column: Column) -> Optional[str]:
    """Closest cast name for a column type, or None for plain strings"""
    col_type = column.type
    # Enum subclasses String and Float subclasses Numeric: check the narrow types first
    if isinstance(col_type, sa_types.Enum):
        return "enum"
    if isinstance(col_type, sa_types.Boolean):
        return "boolean"
    if isinstance(col_type, sa_types.Integer):
        return "integer"
    if isinstance(col_type, sa_types.Float):
        return "float"
    if isinstance(col_type, sa_types.Numeric):
        return "decimal"
    if isinstance(col_type, sa_types.DateTime):
        return "datetime"
    if isinstance(col_type, sa_types.Date):
        return "date"
    if isinstance(col_type, sa_types.Time):
        return "time"
    if isinstance(col_type, (sa_types.JSON, sa_types.ARRAY)):
        return "json"
    return None


def detect_field_type(field: str, cast: Optional[str] = None) -> str:
    if cast is not None:
        return CAST_INPUT_TYPES.get(cast, "text")

    name = field.lower()
    if "email" in name:
        return "email"
    if "password" in name:
        return "password"
    if name in ("phone", "mobile", "whatsapp", "tel"):
        return "tel"
    if name in ("url", "website", "link"):
        return "url"
    if name in ("color", "colour"):
        return "color"
    if any(hint in name for hint in ("price", "cost", "amount")):
        return "decimal"
    if any(hint in name for hint in ("percentage", "percent", "rate")):
        return "percentage"
    if any(hint in name for hint in ("weight", "height", "width", "length")):
        return "decimal"
    if any(hint in name for hint in ("quantity", "count", "number")):
        return "number"
    if any(hint in name for hint in ("description", "content", "notes")):
        return "textarea"
    if any(hint in name for hint in ("image", "photo", "avatar")):
        return "file"
    return "text"


def generate_label(field: str) -> str:
    return string.capwords(field.replace("_", " ").replace("-", " "))


def generate_placeholder(field: str) -> str:
    name = field.lower()
    label = generate_label(field)
    if "email" in name:
        return "Enter your email address"
    if "password" in name:
        return "Enter your password"
    if "phone" in name or "mobile" in name:
        return "Enter your phone number"
    if "name" in name:
        return f"Enter your {label}"
    return f"Enter {label}"


def type_specific_properties(field: str, cast: Optional[str], config: EngineConfig) -> Dict[str, Any]:
    props: Dict[str, Any] = {}
    name = field.lower()

    if "email" in name:
        props["unique"] = True
        props["maxLength"] = 255
    if "password" in name:
        props["minLength"] = 8
    if any(hint in name for hint in ("phone", "mobile", "whatsapp")):
        props["pattern"] = "^[0-9]{10,15}$"
        props["unique"] = True
    if "username" in name:
        props["unique"] = True
        props["maxLength"] = 255

    if cast == "decimal":
        props["step"] = "0.01"
        props["min"] = "0"
    elif cast == "integer":
        props["step"] = "1"
        props["min"] = "0"
    elif cast == "float":
        props["step"] = "0.01"

    if "percentage" in name or "percent" in name:
        props.update({"min": "0", "max": "100", "step": "0.01", "suffix": "%"})
    if any(hint in name for hint in ("price", "cost", "amount")):
        props.update({"step": "0.01", "min": "0", "prefix": config.currency_prefix})
    if "weight" in name:
        props.update({"step": "0.01", "min": "0", "suffix": "kg"})
    if name in ("height", "width", "length"):
        props.update({"step": "0.01", "min": "0", "suffix": "cm"})

    return props


def _enum_options(column: Column) -> List[Dict[str, str]]:
    col_type = column.type
    if col_type.enum_class is not None and issubclass(col_type.enum_class, enum.Enum):
        values = [member.value for member in col_type.enum_class]
    else:
        values = list(col_type.enums)
    return [{"value": str(v), "label": generate_label(str(v))} for v in values]


def _is_required(column: Column) -> bool:
    return not column.nullable and column.default is None and column.server_default is None


def field_schema(column: Column, config: EngineConfig) -> Dict[str, Any]:
    cast = cast_for(column)
    schema = {
        "field": column.key,
        "label": generate_label(column.key),
        "type": detect_field_type(column.key, cast),
        "placeholder": generate_placeholder(column.key),
        "required": _is_required(column),
    }
    schema.update(type_specific_properties(column.key, cast, config))

    length = getattr(column.type, "length", None)
    if cast is None and length and "maxLength" not in schema:
        schema["maxLength"] = length
    if cast == "enum":
        schema["options"] = _enum_options(column)
    return schema


def generate_auto_schema(model, config: EngineConfig) -> List[Dict[str, Any]]:
    """Single general group with one entry per writable column"""
    fields = [field_schema(column, config) for column in model_columns(model)]
    return [{"group": GENERAL_GROUP, "fields": fields}]


def infer_searchable_fields(model) -> List[str]:
    searchable = []
    for column in model_columns(model):
        name = column.key.lower()
        if cast_for(column) in NON_TEXT_CASTS:
            continue
        if "password" in name:
            continue
        if any(hint in name for hint in SEARCH_HINTS):
            searchable.append(column.key)
    return searchable

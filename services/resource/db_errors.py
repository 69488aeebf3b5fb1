"""
Turn database driver errors into client-safe descriptions.

The raw driver message is only ever logged; what comes out of ``parse`` names
the field and the kind of problem, nothing else.
"""
import re
from typing import Any, Dict, Optional

from sqlalchemy.exc import DataError, DBAPIError, IntegrityError

from services.resource.errors import ApiError, InternalServerError, ValidationFailedError

FIELD_PATTERNS = (
    re.compile(r"column '(\w+)'", re.IGNORECASE),
    re.compile(r'column "(\w+)"', re.IGNORECASE),
    re.compile(r"constraint failed: \w+\.(\w+)", re.IGNORECASE),
    re.compile(r"Key \((\w+)\)=", re.IGNORECASE),
    re.compile(r"field '(\w+)'", re.IGNORECASE),
)

CONSTRAINT_MESSAGES = {
    "duplicate_value": "The {field} '{value}' is already taken. Please choose a different value.",
    "foreign_key_constraint": "The selected {field} is invalid or does not exist.",
    "required_field_missing": "The {field} field is required and cannot be empty.",
    "data_type_mismatch": "The {field} field contains an invalid data type.",
    "data_too_long": "The {field} field is too long. Please use fewer characters.",
}

# Kinds a client can fix by changing its payload
CLIENT_FIXABLE = frozenset({
    "duplicate_value", "required_field_missing", "data_too_long", "data_type_mismatch", "foreign_key_constraint",
})


def extract_field_name(message: str) -> Optional[str]:
    for pattern in FIELD_PATTERNS:
        match = pattern.search(message)
        if match:
            return match.group(1)
    return None


def _error_type(message: str) -> str:
    lowered = message.lower()
    if "foreign key" in lowered:
        return "foreign_key_constraint"
    if "not null" in lowered or "null value in column" in lowered:
        return "required_field_missing"
    if "unique" in lowered or "duplicate" in lowered:
        return "duplicate_value"
    if "too long" in lowered:
        return "data_too_long"
    if "incorrect" in lowered or "invalid input syntax" in lowered:
        return "data_type_mismatch"
    return "database_error"


class DatabaseErrorParser:
    """Classifies a SQLAlchemy error into ``{error_type, field, message, suggestion}``"""

    @staticmethod
    def parse(exc: DBAPIError, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        data = data or {}
        raw = str(getattr(exc, "orig", None) or exc)
        error_type = _error_type(raw)
        field = extract_field_name(raw)

        if error_type == "database_error" or field is None:
            return {
                "error_type": error_type,
                "message": "Database operation failed",
                "suggestion": "Check the data format and constraints",
            }

        message = CONSTRAINT_MESSAGES[error_type].format(field=field, value=data.get(field, ""))
        return {
            "error_type": error_type,
            "field": field,
            "message": message,
            "suggestion": f"Provide a valid value for the '{field}' field",
        }

    @staticmethod
    def is_constraint_violation(exc: BaseException) -> bool:
        return isinstance(exc, (IntegrityError, DataError))

    @classmethod
    def to_api_error(cls, exc: DBAPIError, data: Optional[Dict[str, Any]] = None) -> ApiError:
        """Fixable constraint problems become validation failures, the rest a generic 500"""
        if cls.is_constraint_violation(exc):
            parsed = cls.parse(exc, data)
            if parsed["error_type"] in CLIENT_FIXABLE and "field" in parsed:
                return ValidationFailedError(details={parsed["field"]: [parsed["message"]]})
        return InternalServerError("An error occurred while saving the resource")

"""
Database utilities shared by the resource services
"""
from typing import Any, Type, TypeVar

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session

from services.resource.errors import ResourceNotFoundError
from services.resource.query_builder import coerce_value

T = TypeVar('T')


class DatabaseUtils:
    """Utility class for common database operations"""

    @staticmethod
    def coerce_primary_key(model_class: Type[T], obj_id: Any) -> Any:
        """
        Convert a path id to the primary key's Python type

        Raises:
            ResourceNotFoundError: if the id cannot be a key of this model
        """
        pk = sa_inspect(model_class).primary_key[0]
        try:
            return coerce_value(model_class, pk.key, str(obj_id))
        except (ValueError, TypeError):
            raise ResourceNotFoundError(f"Resource with ID '{obj_id}' not found")

    @staticmethod
    def get_by_id_or_404(db: Session, model_class: Type[T], obj_id: Any) -> T:
        """
        Get object by ID or raise a not-found error

        Args:
            db: Database session
            model_class: SQLAlchemy model class
            obj_id: Object ID as received in the path

        Returns:
            Model instance

        Raises:
            ResourceNotFoundError: if object not found
        """
        key = DatabaseUtils.coerce_primary_key(model_class, obj_id)
        obj = db.get(model_class, key)
        if obj is None:
            raise ResourceNotFoundError(f"Resource with ID '{obj_id}' not found")
        return obj

    @staticmethod
    def to_dict(obj: Any, hidden=()) -> dict:
        """Column values of a model instance, minus hidden fields"""
        return {
            col.key: getattr(obj, col.key)
            for col in sa_inspect(obj.__class__).columns
            if col.key not in hidden
        }

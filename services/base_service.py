"""
Base service class with the write paths shared by every registered resource
"""
from typing import Any, Dict, Generic, Type, TypeVar

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session

from services.resource import resource_logger
from services.resource.db_errors import DatabaseErrorParser
from services.resource.errors import InternalServerError
from utils.database_utils import DatabaseUtils

T = TypeVar('T')


class BaseService(Generic[T]):
    """CRUD operations for one model inside the request's session"""

    def __init__(self, db: Session, model_class: Type[T]):
        self.db = db
        self.model_class = model_class
        self.db_utils = DatabaseUtils()

    @property
    def model_name(self) -> str:
        return self.model_class.__name__

    def get_by_id_or_404(self, obj_id: Any) -> T:
        """Get object by ID or raise not-found"""
        return self.db_utils.get_by_id_or_404(self.db, self.model_class, obj_id)

    def create(self, data: Dict[str, Any]) -> T:
        """Create new object"""
        obj = self.model_class(**data)
        self.db.add(obj)
        self._commit("create", data)
        self.db.refresh(obj)
        return obj

    def update(self, obj: T, data: Dict[str, Any]) -> T:
        """Update an already loaded object"""
        for key, value in data.items():
            setattr(obj, key, value)
        self._commit("update", data, obj_id=getattr(obj, "id", None))
        self.db.refresh(obj)
        return obj

    def delete(self, obj: T) -> None:
        """Delete an already loaded object"""
        obj_id = getattr(obj, "id", None)
        self.db.delete(obj)
        self._commit("delete", {}, obj_id=obj_id)

    def _commit(self, operation: str, data: Dict[str, Any], obj_id: Any = None) -> None:
        """Commit the unit of work, or roll all of it back and raise a typed error"""
        try:
            self.db.commit()
        except DBAPIError as exc:
            self.db.rollback()
            resource_logger.log_resource_error(operation, self.model_name, exc, {"id": obj_id, "data": data})
            raise DatabaseErrorParser.to_api_error(exc, data) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            resource_logger.log_resource_error(operation, self.model_name, exc, {"id": obj_id, "data": data})
            raise InternalServerError(f"An error occurred while trying to {operation} the resource") from exc
        resource_logger.log_resource_success(operation, self.model_name, obj_id)

# services/resource/notifications.py
from typing import Any, Dict, List, Optional, Tuple, TypeVar
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Notification(BaseModel):
    """User-facing note about an automatic correction of request input"""

    model_config = ConfigDict(frozen=True)

    type: str = Field(default="warning", pattern="^(info|warning|success)$")
    message: str
    field: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


def warning(message: str, field: Optional[str] = None) -> Notification:
    return Notification(type="warning", message=message, field=field)


def info(message: str, field: Optional[str] = None) -> Notification:
    return Notification(type="info", message=message, field=field)


# Every interpreter step returns its value together with what it had to correct
Normalized = Tuple[T, List[Notification]]


class NotificationBag:
    """Append-only collector threaded through one request"""

    def __init__(self):
        self._items: List[Notification] = []

    def collect(self, result: Normalized) -> Any:
        value, notes = result
        self._items.extend(notes)
        return value

    def add(self, notification: Notification) -> None:
        self._items.append(notification)

    def extend(self, notifications: List[Notification]) -> None:
        self._items.extend(notifications)

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))

    def to_list(self) -> List[Dict[str, Any]]:
        return [n.to_dict() for n in self._items]

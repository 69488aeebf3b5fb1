# services/resource/pagination.py
import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Query

from services.resource.notifications import Normalized, warning


class PageBounds(BaseModel):
    total_items: int
    per_page: int
    current_page: int
    total_pages: int

    @property
    def offset(self) -> int:
        return (self.current_page - 1) * self.per_page

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev(self) -> bool:
        # an empty collection has no pages at all, whatever was requested
        return self.total_pages > 0 and self.current_page > 1


class PaginationInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_items: int = Field(alias="totalItems")
    current_page: int = Field(alias="currentPage")
    items_per_page: int = Field(alias="itemsPerPage")
    total_pages: int = Field(alias="totalPages")
    url_path: str = Field(alias="urlPath")
    url_query: Optional[str] = Field(default=None, alias="urlQuery")
    next_page: Optional[str] = Field(default=None, alias="nextPage")
    prev_page: Optional[str] = Field(default=None, alias="prevPage")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def count_items(query: Query) -> int:
    """Total rows matching the filtered query, independent of any ordering or slice"""
    return query.order_by(None).count()


def compute_bounds(total_items: int, per_page: int, requested_page: int) -> Normalized[PageBounds]:
    total_pages = math.ceil(total_items / per_page) if total_items > 0 else 0
    notes = []
    current = requested_page
    if total_pages > 0 and requested_page > total_pages:
        current = total_pages
        notes.append(warning(
            f"Requested page {requested_page} exceeds available pages. Showing page {total_pages}.",
            field="page",
        ))
    return PageBounds(
        total_items=total_items,
        per_page=per_page,
        current_page=current,
        total_pages=total_pages,
    ), notes


def page_slice(query: Query, bounds: PageBounds) -> List[Any]:
    if bounds.total_pages == 0:
        return []
    return query.offset(bounds.offset).limit(bounds.per_page).all()


def build_pagination_info(bounds: PageBounds, url_path: str, url_query: Optional[str]) -> PaginationInfo:
    return PaginationInfo(
        total_items=bounds.total_items,
        current_page=bounds.current_page,
        items_per_page=bounds.per_page,
        total_pages=bounds.total_pages,
        url_path=url_path,
        url_query=url_query,
        next_page=str(bounds.current_page + 1) if bounds.has_next else None,
        prev_page=str(bounds.current_page - 1) if bounds.has_prev else None,
    )

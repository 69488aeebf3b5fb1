# utils/query_params.py

from typing import Iterable, List, Optional, Set, Tuple
from urllib.parse import urlencode
from fastapi import Request
from pydantic import BaseModel

LIST_KEYS = ("page", "per_page", "sort", "dir", "search")
PAGINATION_KEYS = ("page", "per_page")


class RawFilter(BaseModel):
    # None for the generic ``filter=field:value`` form
    parameter: Optional[str] = None
    raw: str


class ListQueryParams(BaseModel):
    """
    Untyped list parameters exactly as the client sent them.
    Nothing here is trusted; the interpreter turns it into normalized values.
    """
    page: Optional[str] = None
    per_page: Optional[str] = None
    sort: Optional[str] = None
    dir: Optional[str] = None
    search: Optional[str] = None
    # Every filter occurrence, in query-string order
    filters: List[RawFilter] = []
    # Everything except page/per_page, used for pagination links
    url_query: Optional[str] = None
    url_path: str = ""

    @classmethod
    def from_items(
        cls,
        items: Iterable[Tuple[str, str]],
        filter_parameters: Set[str] = frozenset(),
        url_path: str = "",
    ) -> "ListQueryParams":
        values = {}
        filters: List[RawFilter] = []
        passthrough: List[Tuple[str, str]] = []

        for key, value in items:
            if key not in PAGINATION_KEYS:
                passthrough.append((key, value))
            if key in LIST_KEYS:
                # repeated scalar keys: last one wins
                values[key] = value
            elif key == "filter":
                filters.append(RawFilter(raw=value))
            elif key in filter_parameters:
                filters.append(RawFilter(parameter=key, raw=value))

        return cls(
            **values,
            filters=filters,
            url_query=urlencode(passthrough) if passthrough else None,
            url_path=url_path,
        )

    @classmethod
    def from_request(cls, request: Request, filter_parameters: Set[str] = frozenset()) -> "ListQueryParams":
        return cls.from_items(
            request.query_params.multi_items(),
            filter_parameters=filter_parameters,
            url_path=str(request.url.path),
        )

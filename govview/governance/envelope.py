"""
Response shapes.

The HTTP routes serve {data, page: {next}}; the SDK hands callers a list
with hasNext/nextToken. Both wrap the same PageResult.
"""

import time
from typing import Any, Dict, Generic, Iterable, Optional, TypeVar

from govview.governance.models import PageResult
from govview.lib.errors import ApiError

T = TypeVar("T")


def paged_response(result: PageResult) -> Dict[str, Any]:
    body: Dict[str, Any] = {"data": [item.to_json() for item in result.items]}
    if result.next is not None:
        body["page"] = {"next": result.next}
    return body


def single_response(item: Any) -> Dict[str, Any]:
    return {"data": item.to_json()}


def error_envelope(err: ApiError, url: str) -> Dict[str, Any]:
    return {
        "code": err.status_code,
        "type": err.type,
        "at": int(time.time() * 1000),
        "message": err.message,
        "url": url,
    }


class ApiPagedList(list, Generic[T]):
    """A page as a plain list, plus where to continue."""

    def __init__(self, items: Iterable[T] = (), next_token: Optional[str] = None):
        super().__init__(items)
        self.next_token = next_token

    @property
    def has_next(self) -> bool:
        return self.next_token is not None

    @classmethod
    def of(cls, result: PageResult) -> "ApiPagedList":
        return cls(result.items, result.next)

    def __repr__(self) -> str:
        return f"ApiPagedList({list.__repr__(self)}, next_token={self.next_token!r})"

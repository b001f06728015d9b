"""
jsondb/pagination.py
Page arithmetic and a read-only paginated view over a Collection.

The math lives in page_bounds(), a pure function of
(total items, items per page, requested page). PaginatedCollection only
evaluates it once and slices the collection accordingly.
"""

from __future__ import annotations
import json
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jsondb.collection import Collection


@dataclass(frozen=True)
class PageBounds:
    current_page: int
    start: int          # 1-based position of the first item on the page
    end: int            # 1-based position of the last item; < start when the page is empty
    last_page: int


def page_bounds(total: int, per_page: int, page: int) -> PageBounds:
    if per_page < 1:
        raise ValueError(f"per_page must be at least 1, got {per_page}")
    current = max(1, page)
    start = per_page * (current - 1) + 1
    end = min(total, start + per_page - 1)
    last = max(1, math.ceil(total / per_page))
    return PageBounds(current_page=current, start=start, end=end, last_page=last)


class PaginatedCollection:
    """
    Snapshot of one page of a collection.

    `data` mirrors the serialised form:
      current_page, data, from, total, last_page, per_page, to
    """

    def __init__(self, collection: "Collection", per_page: int = 10, page: int = 1) -> None:
        self.collection = collection
        self.per_page = per_page
        self.bounds = page_bounds(collection.length, per_page, page)
        self.data: dict[str, Any] = {
            "current_page": self.bounds.current_page,
            "data": self._page_items(),
            "from": self.bounds.start,
            "total": collection.length,
            "last_page": self.bounds.last_page,
            "per_page": per_page,
            "to": self.bounds.end,
        }

    def extend(self, key: str, value: Any) -> "PaginatedCollection":
        """Attach an extra property (e.g. a base URL) to the serialised page."""
        self.data[key] = value
        return self

    def is_empty(self) -> bool:
        return len(self.data["data"]) == 0

    def to_array(self) -> dict[str, Any]:
        return dict(self.data)

    def to_json(self) -> str:
        return json.dumps(self.data, ensure_ascii=False)

    def _page_items(self) -> list[Any]:
        count = self.bounds.end - self.bounds.start + 1
        if count <= 0:
            return []
        return self.collection.slice(self.bounds.start - 1, count).to_array()

    def __repr__(self) -> str:
        return (
            f"PaginatedCollection(page={self.bounds.current_page}/{self.bounds.last_page}, "
            f"per_page={self.per_page}, total={self.data['total']})"
        )

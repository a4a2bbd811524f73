"""Length-aware pagination.

The responder only needs the ``Paginator`` protocol. ``LengthAwarePaginator``
is the stock implementation: it holds one page of items plus the total count
of the underlying result set and builds the adjacent-page links.
"""

import math
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlencode

from starlette.requests import Request

from apikit.config import settings


@runtime_checkable
class Paginator(Protocol):
    def total(self) -> int: ...

    def per_page(self) -> int: ...

    def current_page(self) -> int: ...

    def next_page_url(self) -> str | None: ...

    def previous_page_url(self) -> str | None: ...

    def appends(self, params: Mapping[str, Any]) -> "Paginator": ...


def _coerce_page(raw: str | None) -> int:
    try:
        return int(raw) if raw is not None else 1
    except ValueError:
        return 1


class LengthAwarePaginator:
    """One page of a result set whose total size is known."""

    def __init__(
        self,
        items: Sequence[Any],
        total: int,
        per_page: int,
        current_page: int = 1,
        *,
        path: str = "/",
        page_name: str = "page",
    ) -> None:
        if per_page < 1:
            raise ValueError("per_page must be at least 1")
        self.items = list(items)
        self._total = max(int(total), 0)
        self._per_page = int(per_page)
        self._current_page = max(int(current_page), 1)
        self.path = path
        self.page_name = page_name
        self._query: dict[str, Any] = {}

    @classmethod
    def from_request(
        cls,
        items: Sequence[Any],
        total: int,
        request: Request,
        per_page: int,
        page_name: str | None = None,
    ) -> "LengthAwarePaginator":
        """Build a paginator for the page requested via the query string."""
        page_name = page_name or settings.page_param
        return cls(
            items,
            total,
            per_page,
            _coerce_page(request.query_params.get(page_name)),
            path=str(request.url.replace(query="")),
            page_name=page_name,
        )

    def total(self) -> int:
        return self._total

    def per_page(self) -> int:
        return self._per_page

    def current_page(self) -> int:
        return self._current_page

    def last_page(self) -> int:
        return max(math.ceil(self._total / self._per_page), 1)

    def has_more_pages(self) -> bool:
        return self._current_page < self.last_page()

    def appends(self, params: Mapping[str, Any]) -> "LengthAwarePaginator":
        """Merge query parameters into every generated link."""
        for key, value in params.items():
            self._query[key] = value
        return self

    def url(self, page: int) -> str:
        # The page parameter always wins over an appended one.
        query = {k: v for k, v in self._query.items() if k != self.page_name}
        query[self.page_name] = max(page, 1)
        separator = "&" if "?" in self.path else "?"
        return f"{self.path}{separator}{urlencode(query, doseq=True)}"

    def next_page_url(self) -> str | None:
        if self.has_more_pages():
            return self.url(self._current_page + 1)
        return None

    def previous_page_url(self) -> str | None:
        if self._current_page > 1:
            return self.url(self._current_page - 1)
        return None

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return (
            f"LengthAwarePaginator(total={self._total}, per_page={self._per_page}, "
            f"current_page={self._current_page})"
        )

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence, TypeVar

from vidgraph.config import settings
from vidgraph.core.errors import InvalidArgument
from vidgraph.core.schemas import Page

T = TypeVar("T")

DEFAULT_PAGE = 1


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def coerce_page_params(page: Any = None, limit: Any = None) -> PageRequest:
    """Turn raw page/limit input into a PageRequest.

    Missing or unparsable values fall back to page 1 and the default limit.
    A parsed limit of zero or below is rejected, large limits are capped.
    """
    parsed_page = _as_int(page)
    if parsed_page is None or parsed_page < 1:
        parsed_page = DEFAULT_PAGE

    parsed_limit = _as_int(limit)
    if parsed_limit is None:
        parsed_limit = settings.DEFAULT_PAGE_LIMIT
    elif parsed_limit <= 0:
        raise InvalidArgument("Limit must be a positive integer")
    parsed_limit = min(parsed_limit, settings.MAX_PAGE_LIMIT)

    return PageRequest(page=parsed_page, limit=parsed_limit)


def build_page(items: Sequence[T], total_items: int, request: PageRequest) -> Page[T]:
    """Wrap one already-sliced page of results with its navigation metadata."""
    total_pages = max(1, math.ceil(total_items / request.limit))
    has_next = request.page < total_pages
    has_prev = request.page > 1
    return Page(
        items=list(items),
        page=request.page,
        limit=request.limit,
        total_items=total_items,
        total_pages=total_pages,
        has_next=has_next,
        has_prev=has_prev,
        next_page=request.page + 1 if has_next else None,
        prev_page=request.page - 1 if has_prev else None,
    )


def paginate(ordered_items: Sequence[T], page: Any = None, limit: Any = None) -> Page[T]:
    request = coerce_page_params(page, limit)
    window = ordered_items[request.offset:request.offset + request.limit]
    return build_page(window, len(ordered_items), request)

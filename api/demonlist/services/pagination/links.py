"""``Link`` header construction for paginated listings."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, TypeVar
from urllib.parse import urlencode

from ...config import settings
from ...errors import InternalError
from .engine import Page
from .params import PaginationParameters

logger = logging.getLogger(__name__)

T = TypeVar("T")

LINK_HEADER = "Link"
CURSOR_PARAMS = {"before", "after", "limit"}


class LinksBuilder:
    """Collects navigation relations and renders them as one header value.

    Each relation reuses the request's query string with the cursor replaced.
    Relations render sorted by name.
    """

    def __init__(
        self,
        endpoint: str,
        query: Iterable[tuple[str, str]] = (),
        default_limit: int | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.query = [(key, value) for key, value in query if key not in CURSOR_PARAMS]
        self.default_limit = settings.default_page_limit if default_limit is None else default_limit
        self.rels: dict[str, tuple[str, int]] = {}

    def with_first(self, key_before_first: int) -> "LinksBuilder":
        self.rels["first"] = ("after", key_before_first)
        return self

    def with_last(self, key_after_last: int) -> "LinksBuilder":
        self.rels["last"] = ("before", key_after_last)
        return self

    def with_next(self, after: int) -> "LinksBuilder":
        self.rels["next"] = ("after", after)
        return self

    def with_prev(self, before: int) -> "LinksBuilder":
        self.rels["prev"] = ("before", before)
        return self

    def generate(self, limit: int | None = None) -> str:
        extra = [] if limit is None or limit == self.default_limit else [("limit", str(limit))]
        links = []
        for rel in sorted(self.rels):
            cursor, value = self.rels[rel]
            query_string = urlencode([*self.query, (cursor, str(value)), *extra])
            links.append(f"<{self.endpoint}?{query_string}>; rel={rel}")
        return ",".join(links)


def build_links(
    builder: LinksBuilder,
    page: Page[T],
    params: PaginationParameters,
    extrema: tuple[int, int] | None,
    key_of: Callable[[T], int],
) -> str:
    """Fill ``builder`` from a page and the collection's key extrema."""
    if extrema is not None:
        smallest, largest = extrema
        builder.with_first(smallest - 1).with_last(largest + 1)

    if page.has_next:
        if page.items:
            builder.with_next(key_of(page.items[-1]))
        elif params.before is not None:
            # Empty page below the first match: continue right below the old bound.
            builder.with_next(params.before - 1)
        else:
            logger.error("empty_page_without_before", extra={"params": repr(params)})
            raise InternalError("Empty page claims a next page exists, yet 'before' is not set")

    if page.has_prev:
        if page.items:
            builder.with_prev(key_of(page.items[0]))
        elif params.after is not None:
            builder.with_prev(params.after + 1)
        else:
            logger.error("empty_page_without_after", extra={"params": repr(params)})
            raise InternalError("Empty page claims a previous page exists, yet 'after' is not set")

    return builder.generate(params.limit)

"""Generic keyset pagination.

A listing resource implements ``Paginatable``; ``paginate`` is the only
cursor algorithm and knows nothing about the entity it pages over.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Protocol, Sequence, TypeVar

from .params import PaginationParameters

T = TypeVar("T")


class Paginatable(Protocol[T]):
    async def scan(
        self,
        *,
        before: int | None,
        after: int | None,
        limit: int,
        descending: bool,
    ) -> Sequence[T]:
        """Up to ``limit`` filtered items with ``after < key < before``, ordered by key."""

    async def first_and_last(self) -> tuple[int, int] | None:
        """Smallest and largest key of the visible collection, ignoring request filters."""

    def key_of(self, item: T) -> int: ...


@dataclass
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    has_next: bool = False
    has_prev: bool = False


async def paginate(source: Paginatable[T], params: PaginationParameters) -> Page[T]:
    descending = params.descending
    rows = list(
        await source.scan(
            before=params.before,
            after=params.after,
            limit=params.limit + 1,
            descending=descending,
        )
    )

    page: Page[T] = Page()
    if len(rows) > params.limit:
        rows = rows[: params.limit]
        if descending:
            page.has_prev = True
        else:
            page.has_next = True

    if descending:
        rows.reverse()
    page.items = rows

    # A bound on the opposite side means rows may lie beyond it.
    if params.before is not None and not page.has_next:
        beyond = await source.scan(before=None, after=params.before - 1, limit=1, descending=False)
        page.has_next = bool(beyond)
    if params.after is not None and not page.has_prev:
        beyond = await source.scan(before=params.after + 1, after=None, limit=1, descending=True)
        page.has_prev = bool(beyond)

    return page

"""SQL-backed ``Paginatable`` sources."""

from __future__ import annotations

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from ...db.base import Base
from ...errors import ValueOutOfRange
from ...utils.bounds import INT32_MAX, INT32_MIN, fits_int32

M = TypeVar("M", bound=Base)


def compare(
    column: Any,
    *,
    eq: Any = None,
    lt: Any = None,
    gt: Any = None,
) -> list[ColumnElement[bool]]:
    """Equality and range clauses for the bounds that were supplied.

    Integer bounds outside the 32-bit column range are refused up front.
    """
    clauses: list[ColumnElement[bool]] = []
    for value in (eq, lt, gt):
        if isinstance(value, int) and not isinstance(value, bool) and not fits_int32(value):
            raise ValueOutOfRange(column.key, INT32_MIN, INT32_MAX)
    if eq is not None:
        clauses.append(column == eq)
    if lt is not None:
        clauses.append(column < lt)
    if gt is not None:
        clauses.append(column > gt)
    return clauses


def contains(column: Any, fragment: str | None) -> list[ColumnElement[bool]]:
    if fragment is None:
        return []
    escaped = fragment.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return [column.ilike(f"%{escaped}%", escape="\\")]


class SqlListing(Generic[M]):
    """Keyset scans over one model ordered by a unique integer column.

    ``visibility`` restricts what the caller may see at all and also bounds
    ``first_and_last``; ``filters`` come from the request and only narrow scans.
    """

    model: type[M]
    key: InstrumentedAttribute

    def __init__(
        self,
        session: AsyncSession,
        *,
        filters: Sequence[ColumnElement[bool]] = (),
        visibility: Sequence[ColumnElement[bool]] = (),
    ) -> None:
        self.session = session
        self.filters = list(filters)
        self.visibility = list(visibility)

    def scan_statement(
        self,
        *,
        before: int | None,
        after: int | None,
        limit: int,
        descending: bool,
    ) -> Select:
        stmt = select(self.model).where(*self.visibility, *self.filters)
        if before is not None:
            stmt = stmt.where(self.key < before)
        if after is not None:
            stmt = stmt.where(self.key > after)
        order = self.key.desc() if descending else self.key.asc()
        return stmt.order_by(order).limit(limit)

    def extrema_statement(self) -> Select:
        return select(func.min(self.key), func.max(self.key)).select_from(self.model).where(*self.visibility)

    async def scan(
        self,
        *,
        before: int | None,
        after: int | None,
        limit: int,
        descending: bool,
    ) -> Sequence[M]:
        stmt = self.scan_statement(before=before, after=after, limit=limit, descending=descending)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def first_and_last(self) -> tuple[int, int] | None:
        row = (await self.session.execute(self.extrema_statement())).one()
        if row[0] is None:
            return None
        return int(row[0]), int(row[1])

    def key_of(self, item: M) -> int:
        return getattr(item, self.key.key)

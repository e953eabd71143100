"""Cursor parameters for listing requests."""

from __future__ import annotations

from dataclasses import dataclass

from ...config import settings
from ...errors import InvalidCursorWindow, InvalidPaginationLimit, ValueOutOfRange
from ...utils.bounds import INT32_MAX, INT32_MIN, fits_int32


@dataclass(frozen=True)
class PaginationParameters:
    """A page request: keys strictly below ``before`` and/or above ``after``.

    With both bounds set the page is the open window ``after < key < before``,
    read in ascending order.
    """

    before: int | None = None
    after: int | None = None
    limit: int = settings.default_page_limit

    @property
    def descending(self) -> bool:
        return self.before is not None and self.after is None

    def validate(self, max_limit: int | None = None) -> "PaginationParameters":
        max_limit = settings.max_page_limit if max_limit is None else max_limit
        if not 1 <= self.limit <= max_limit:
            raise InvalidPaginationLimit(max_limit)
        for name, cursor in (("before", self.before), ("after", self.after)):
            if cursor is not None and not fits_int32(cursor):
                raise ValueOutOfRange(name, INT32_MIN, INT32_MAX)
        if self.before is not None and self.after is not None and self.before <= self.after:
            raise InvalidCursorWindow(self.before, self.after)
        return self

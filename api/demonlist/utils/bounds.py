"""Range of the 32-bit ``Integer`` columns that ids, positions and progress live in."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]


def fits_int32(value: int) -> bool:
    return INT32_MIN <= value <= INT32_MAX

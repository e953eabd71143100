"""Glue between listing endpoints and the cursor paginator."""

from __future__ import annotations

from typing import Sequence, TypeVar

from fastapi import Depends, Query, Request, Response

from ..config import settings
from ..dependencies.auth import Caller, get_caller
from ..services.pagination import (
    LINK_HEADER,
    LinksBuilder,
    Paginatable,
    PaginationParameters,
    build_links,
    paginate,
)

T = TypeVar("T")


async def pagination_params(
    before: int | None = Query(None),
    after: int | None = Query(None),
    limit: int | None = Query(None),
    caller: Caller = Depends(get_caller),
) -> PaginationParameters:
    """Cursor parameters of the request; only the list team may change the page size."""
    if limit is None or not caller.is_helper:
        limit = settings.default_page_limit
    return PaginationParameters(before=before, after=after, limit=limit).validate()


async def paginated(
    source: Paginatable[T],
    params: PaginationParameters,
    request: Request,
    response: Response,
) -> Sequence[T]:
    """Fetch one page and attach its navigation links to ``response``."""
    page = await paginate(source, params)
    extrema = await source.first_and_last()
    builder = LinksBuilder(request.url.path, request.query_params.multi_items())
    response.headers[LINK_HEADER] = build_links(builder, page, params, extrema, source.key_of)
    return page.items

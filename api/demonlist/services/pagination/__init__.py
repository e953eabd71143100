"""Cursor pagination shared by every listing endpoint."""

from .engine import Page, Paginatable, paginate
from .links import LINK_HEADER, LinksBuilder, build_links
from .params import PaginationParameters

__all__ = [
    "LINK_HEADER",
    "LinksBuilder",
    "Page",
    "Paginatable",
    "PaginationParameters",
    "build_links",
    "paginate",
]

"""Tests for the generic cursor paginator."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import pytest

from demonlist.services.pagination import LinksBuilder, PaginationParameters, build_links, paginate

from fakes import InMemoryListing

LIMIT = 3


def _links(header: str) -> dict[str, dict[str, int]]:
    """Parse a Link header into {rel: {cursor: value}}."""
    parsed = {}
    for entry in filter(None, header.split(",")):
        target, rel = entry.split("; rel=")
        query = parse_qs(urlsplit(target.strip("<>")).query)
        parsed[rel] = {key: int(values[0]) for key, values in query.items() if key in {"before", "after"}}
    return parsed


async def _fetch(listing, **cursor):
    params = PaginationParameters(limit=LIMIT, **cursor).validate()
    page = await paginate(listing, params)
    header = build_links(
        LinksBuilder("/items/", default_limit=LIMIT),
        page,
        params,
        await listing.first_and_last(),
        listing.key_of,
    )
    return [item.key for item in page.items], page, _links(header)


class TestPaginate:
    @pytest.mark.asyncio
    async def test_forward_pages_over_five_ids(self) -> None:
        listing = InMemoryListing([1, 2, 3, 4, 5])
        params = PaginationParameters(limit=2)

        first = await paginate(listing, params)
        assert [i.key for i in first.items] == [1, 2]
        assert first.has_next and not first.has_prev

        second = await paginate(listing, PaginationParameters(after=2, limit=2))
        assert [i.key for i in second.items] == [3, 4]

        third = await paginate(listing, PaginationParameters(after=4, limit=2))
        assert [i.key for i in third.items] == [5]
        assert not third.has_next and third.has_prev

    @pytest.mark.asyncio
    async def test_before_only_scans_descending_and_returns_ascending(self) -> None:
        listing = InMemoryListing(range(1, 11))

        page = await paginate(listing, PaginationParameters(before=8, limit=3))

        assert [i.key for i in page.items] == [5, 6, 7]
        assert page.has_prev and page.has_next
        assert listing.scans[0] == {"before": 8, "after": None, "limit": 4, "descending": True}

    @pytest.mark.asyncio
    async def test_window_between_both_bounds(self) -> None:
        listing = InMemoryListing(range(1, 11))

        page = await paginate(listing, PaginationParameters(before=6, after=2, limit=5))

        assert [i.key for i in page.items] == [3, 4, 5]
        assert page.has_next and page.has_prev

    @pytest.mark.asyncio
    async def test_empty_collection(self) -> None:
        listing = InMemoryListing([])

        page = await paginate(listing, PaginationParameters(limit=LIMIT))

        assert page.items == [] and not page.has_next and not page.has_prev
        assert await listing.first_and_last() is None


class TestWalkingLinks:
    @pytest.mark.parametrize("size", range(0, 3 * LIMIT + 2))
    @pytest.mark.asyncio
    async def test_next_links_from_first_cover_collection(self, size: int) -> None:
        keys = [key * 10 for key in range(1, size + 1)]
        listing = InMemoryListing(keys)
        _, _, links = await _fetch(listing)

        seen: list[int] = []
        cursor = links.get("first")
        while cursor is not None:
            items, _, links = await _fetch(listing, **cursor)
            seen.extend(items)
            cursor = links.get("next")

        assert seen == keys

    @pytest.mark.parametrize("size", range(0, 3 * LIMIT + 2))
    @pytest.mark.asyncio
    async def test_prev_links_from_last_cover_collection_in_reverse(self, size: int) -> None:
        keys = [key * 10 for key in range(1, size + 1)]
        listing = InMemoryListing(keys)
        _, _, links = await _fetch(listing)

        pages: list[list[int]] = []
        cursor = links.get("last")
        while cursor is not None:
            items, _, links = await _fetch(listing, **cursor)
            pages.append(items)
            cursor = links.get("prev")

        walked = [key for page in pages for key in reversed(page)]
        assert walked == list(reversed(keys))

    @pytest.mark.asyncio
    async def test_filtered_walk_skips_hidden_rows(self) -> None:
        listing = InMemoryListing(range(1, 21), matches=lambda key: key % 3 == 0)
        _, _, links = await _fetch(listing)

        seen: list[int] = []
        cursor = links.get("first")
        while cursor is not None:
            items, _, links = await _fetch(listing, **cursor)
            seen.extend(items)
            cursor = links.get("next")

        assert seen == [3, 6, 9, 12, 15, 18]


class TestEmptyPageBoundary:
    @pytest.mark.asyncio
    async def test_empty_page_below_first_match_links_forward(self) -> None:
        # Visible keys 1..10, but the filter only matches 8 and above.
        listing = InMemoryListing(range(1, 11), matches=lambda key: key >= 8)

        items, page, links = await _fetch(listing, before=5)

        assert items == []
        assert page.has_next and not page.has_prev
        assert links["next"] == {"after": 4}
        assert links["first"] == {"after": 0}

        items, _, _ = await _fetch(listing, **links["next"])
        assert items == [8, 9, 10]

    @pytest.mark.asyncio
    async def test_empty_page_above_last_match_links_backward(self) -> None:
        listing = InMemoryListing(range(1, 11), matches=lambda key: key <= 3)

        items, page, links = await _fetch(listing, after=6)

        assert items == []
        assert page.has_prev and not page.has_next
        assert links["prev"] == {"before": 7}

        items, _, _ = await _fetch(listing, **links["prev"])
        assert items == [1, 2, 3]

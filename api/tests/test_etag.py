"""Tests for record entity tags and If-Match handling."""

from __future__ import annotations

import pytest

from demonlist.db.models import Demon, Player, Record, RecordStatus
from demonlist.errors import PreconditionFailed, PreconditionRequired
from demonlist.utils.etag import check_if_match, record_etag


@pytest.fixture
def record() -> Record:
    return Record(
        id=1,
        progress=70,
        video="https://vimeo.com/1",
        status=RecordStatus.SUBMITTED,
        player=Player(id=1, name="Alice", banned=False),
        demon=Demon(id=1, name="Bloodbath", position=1, requirement=50),
    )


class TestRecordEtag:
    def test_changes_with_fields(self, record: Record) -> None:
        before = record_etag(record)
        record.status = RecordStatus.APPROVED

        assert record_etag(record) != before

    def test_quoted(self, record: Record) -> None:
        tag = record_etag(record)

        assert tag.startswith('"') and tag.endswith('"')


class TestCheckIfMatch:
    def test_matching_tag(self, record: Record) -> None:
        check_if_match(record_etag(record), record)

    def test_unquoted_and_weak_tags_accepted(self, record: Record) -> None:
        bare = record_etag(record).strip('"')

        check_if_match(bare, record)
        check_if_match(f'W/"{bare}"', record)

    def test_any_of_several(self, record: Record) -> None:
        check_if_match(f'"stale", {record_etag(record)}', record)

    def test_mismatch(self, record: Record) -> None:
        with pytest.raises(PreconditionFailed):
            check_if_match('"stale"', record)

    def test_missing_required(self, record: Record) -> None:
        with pytest.raises(PreconditionRequired):
            check_if_match(None, record)

    def test_missing_optional(self, record: Record) -> None:
        check_if_match(None, record, required=False)

"""Tests for schema objects declared on the models and created by migrations."""

from __future__ import annotations

from demonlist.db.models import Player, Record, RecordNote


class TestSchemaDeclarations:
    def test_progress_range_check(self) -> None:
        names = {constraint.name for constraint in Record.__table__.constraints}

        assert "ck_records_progress_range" in names

    def test_case_insensitive_name_index(self) -> None:
        indexes = {index.name: index for index in Player.__table__.indexes}

        assert "idx_players_name_lower" in indexes
        assert "lower" in str(list(indexes["idx_players_name_lower"].expressions)[0])

    def test_notes_follow_record_deletion(self) -> None:
        (foreign_key,) = RecordNote.__table__.c.record_id.foreign_keys

        assert foreign_key.target_fullname == "records.id"
        assert foreign_key.ondelete == "CASCADE"
        assert RecordNote.__table__.c.record_id.index

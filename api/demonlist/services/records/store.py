"""Data access for the record lifecycle engine.

``RecordStore`` is the narrow surface the engine works against; ``SqlRecordStore``
implements it on a request-scoped ``AsyncSession`` so every call shares the
request's transaction.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.models import Demon, Player, Record, RecordNote, RecordStatus, Submitter
from ...errors import NotFound


class RecordStore(Protocol):
    async def lock_pair(self, player_id: int, demon_id: int) -> None:
        """Serialize writers of one (player, demon) pair until the transaction ends."""

    async def find_player(self, name: str) -> Player | None: ...

    async def create_player(self, name: str) -> Player: ...

    async def get_demon(self, ref: int | str) -> Demon:
        """Resolve a demon by id or by name; raise ``NotFound`` otherwise."""

    async def get_record(self, record_id: int) -> Record:
        """Raise ``NotFound`` for unknown ids."""

    async def records_for(self, player_id: int, demon_id: int) -> Sequence[Record]: ...

    async def record_with_video(self, video: str) -> Record | None: ...

    async def insert_record(self, record: Record) -> Record: ...

    async def save_record(self, record: Record) -> Record: ...

    async def delete_records(self, records: Sequence[Record]) -> None: ...

    async def add_note(self, record: Record, content: str) -> RecordNote: ...

    async def notes_for(self, record_id: int) -> Sequence[RecordNote]: ...

    async def transfer_notes(self, sources: Sequence[Record], target: Record) -> int:
        """Move every note of ``sources`` onto ``target``; return how many moved."""

    async def submitter_for_ip(self, ip: str) -> Submitter:
        """Return the submitter for ``ip``, creating it on first sight."""

    async def submission_count(self) -> int:
        """Number of records still awaiting review."""


class SqlRecordStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def lock_pair(self, player_id: int, demon_id: int) -> None:
        await self.session.execute(select(func.pg_advisory_xact_lock(player_id, demon_id)))

    async def find_player(self, name: str) -> Player | None:
        stmt = select(Player).where(func.lower(Player.name) == name.strip().lower())
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def create_player(self, name: str) -> Player:
        player = Player(name=name.strip(), banned=False)
        self.session.add(player)
        await self.session.flush()
        return player

    async def get_demon(self, ref: int | str) -> Demon:
        if isinstance(ref, int):
            demon = await self.session.get(Demon, ref)
            if demon is None:
                raise NotFound("demon", id=ref)
            return demon
        stmt = select(Demon).where(func.lower(Demon.name) == ref.strip().lower()).order_by(Demon.position)
        demon = (await self.session.execute(stmt)).scalars().first()
        if demon is None:
            raise NotFound("demon", name=ref)
        return demon

    async def get_record(self, record_id: int) -> Record:
        record = await self.session.get(Record, record_id)
        if record is None:
            raise NotFound("record", id=record_id)
        return record

    async def records_for(self, player_id: int, demon_id: int) -> Sequence[Record]:
        stmt = (
            select(Record)
            .where(Record.player_id == player_id, Record.demon_id == demon_id)
            .order_by(Record.id)
        )
        return (await self.session.execute(stmt)).scalars().all()

    async def record_with_video(self, video: str) -> Record | None:
        stmt = select(Record).where(Record.video == video).limit(1)
        return (await self.session.execute(stmt)).scalars().first()

    async def insert_record(self, record: Record) -> Record:
        self.session.add(record)
        await self.session.flush()
        return record

    async def save_record(self, record: Record) -> Record:
        await self.session.flush()
        return record

    async def delete_records(self, records: Sequence[Record]) -> None:
        for record in records:
            await self.session.delete(record)
        await self.session.flush()

    async def add_note(self, record: Record, content: str) -> RecordNote:
        note = RecordNote(record_id=record.id, content=content, transferred=False)
        self.session.add(note)
        await self.session.flush()
        return note

    async def notes_for(self, record_id: int) -> Sequence[RecordNote]:
        stmt = select(RecordNote).where(RecordNote.record_id == record_id).order_by(RecordNote.id)
        return (await self.session.execute(stmt)).scalars().all()

    async def transfer_notes(self, sources: Sequence[Record], target: Record) -> int:
        source_ids = [record.id for record in sources if record.id != target.id]
        if not source_ids:
            return 0
        stmt = (
            update(RecordNote)
            .where(RecordNote.record_id.in_(source_ids))
            .values(record_id=target.id, transferred=True)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def submitter_for_ip(self, ip: str) -> Submitter:
        stmt = select(Submitter).where(Submitter.ip == ip)
        submitter = (await self.session.execute(stmt)).scalar_one_or_none()
        if submitter is None:
            submitter = Submitter(ip=ip, banned=False)
            self.session.add(submitter)
            await self.session.flush()
        return submitter

    async def submission_count(self) -> int:
        stmt = select(func.count()).select_from(Record).where(Record.status == RecordStatus.SUBMITTED)
        return int((await self.session.execute(stmt)).scalar_one())

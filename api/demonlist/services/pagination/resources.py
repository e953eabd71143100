"""Listing sources for records, players, demons and submitters."""

from __future__ import annotations

from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.models import Demon, Player, Record, RecordStatus, Submitter
from ...errors import MissingPermissions
from ..records.policy import Privilege
from .sql import SqlListing, compare, contains


class RecordFilters(BaseModel):
    progress: int | None = None
    progress__lt: int | None = None
    progress__gt: int | None = None
    demon_position: int | None = None
    demon_position__lt: int | None = None
    demon_position__gt: int | None = None
    status: RecordStatus | None = None
    player: int | None = None
    demon: str | None = None
    demon_id: int | None = None
    video: str | None = None
    submitter: int | None = None


class PlayerFilters(BaseModel):
    name: str | None = None
    name_contains: str | None = None
    banned: bool | None = None


class DemonFilters(BaseModel):
    name: str | None = None
    requirement: int | None = None
    requirement__lt: int | None = None
    requirement__gt: int | None = None


class SubmitterFilters(BaseModel):
    banned: bool | None = None


class RecordListing(SqlListing[Record]):
    model = Record
    key = Record.id

    def __init__(self, session: AsyncSession, filters: RecordFilters, privilege: Privilege) -> None:
        if filters.status not in (None, RecordStatus.APPROVED) and privilege < Privilege.HELPER:
            raise MissingPermissions("list helper")
        if filters.submitter is not None and privilege < Privilege.MODERATOR:
            raise MissingPermissions("list moderator")

        visibility = [] if privilege >= Privilege.HELPER else [Record.status == RecordStatus.APPROVED]

        clauses = compare(Record.progress, eq=filters.progress, lt=filters.progress__lt, gt=filters.progress__gt)
        clauses += [
            Record.demon.has(clause)
            for clause in compare(
                Demon.position,
                eq=filters.demon_position,
                lt=filters.demon_position__lt,
                gt=filters.demon_position__gt,
            )
        ]
        clauses += compare(Record.status, eq=filters.status)
        clauses += compare(Record.player_id, eq=filters.player)
        clauses += compare(Record.demon_id, eq=filters.demon_id)
        clauses += compare(Record.video, eq=filters.video)
        clauses += compare(Record.submitter_id, eq=filters.submitter)
        if filters.demon is not None:
            clauses.append(Record.demon.has(func.lower(Demon.name) == filters.demon.lower()))

        super().__init__(session, filters=clauses, visibility=visibility)


class PlayerListing(SqlListing[Player]):
    model = Player
    key = Player.id

    def __init__(self, session: AsyncSession, filters: PlayerFilters, privilege: Privilege) -> None:
        visibility = [] if privilege >= Privilege.HELPER else [Player.banned.is_(False)]
        clauses = []
        if filters.name is not None:
            clauses.append(func.lower(Player.name) == filters.name.lower())
        clauses += contains(Player.name, filters.name_contains)
        clauses += compare(Player.banned, eq=filters.banned)
        super().__init__(session, filters=clauses, visibility=visibility)


class DemonListing(SqlListing[Demon]):
    model = Demon
    key = Demon.position

    def __init__(self, session: AsyncSession, filters: DemonFilters) -> None:
        clauses = []
        if filters.name is not None:
            clauses.append(func.lower(Demon.name) == filters.name.lower())
        clauses += compare(
            Demon.requirement,
            eq=filters.requirement,
            lt=filters.requirement__lt,
            gt=filters.requirement__gt,
        )
        super().__init__(session, filters=clauses)


class SubmitterListing(SqlListing[Submitter]):
    model = Submitter
    key = Submitter.id

    def __init__(self, session: AsyncSession, filters: SubmitterFilters, privilege: Privilege) -> None:
        if privilege < Privilege.MODERATOR:
            raise MissingPermissions("list moderator")
        super().__init__(session, filters=compare(Submitter.banned, eq=filters.banned))

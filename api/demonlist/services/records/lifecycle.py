"""Record lifecycle: submission, patching and deletion.

Every operation runs inside the caller's transaction. Writers of a
(player, demon) pair take a transaction-scoped lock on that pair before
reading its records, so the dedup scan and the writes that depend on it
cannot interleave with another writer of the same pair.

Invariants held after every commit:
1. per (player, demon) at most one approved record
2. per (player, demon, video) at most one record
3. per (player, demon, status) no record dominated by a higher-progress one
4. a rejected record blocks new submissions for its pair
5. progress within [demon.requirement, 100]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ...config import settings
from ...db.models import Demon, Player, Record, RecordStatus, Submitter
from ...errors import BannedFromSubmissions, DuplicateSubmission, MutuallyExclusive, PlayerBanned
from ...utils.video import normalize_video
from .policy import (
    Privilege,
    blocks_submission,
    check_submission_gates,
    check_transition,
    validate_progress,
)
from .store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class Submission:
    progress: int
    player: str
    demon: int | str
    video: str | None = None
    status: RecordStatus = RecordStatus.SUBMITTED
    note: str | None = None
    verify_only: bool = False


@dataclass
class RecordPatch:
    """Requested changes; ``None`` leaves a field untouched.

    ``clear_video`` distinguishes an explicit ``null`` video from an omitted one.
    ``demon`` (id or name) and ``demon_id`` are alternative ways to move the
    record; giving both is an error.
    """

    progress: int | None = None
    video: str | None = None
    clear_video: bool = False
    status: RecordStatus | None = None
    player: str | None = None
    demon: int | str | None = None
    demon_id: int | None = None


@dataclass
class _Draft:
    progress: int
    video: str | None
    status: RecordStatus
    player: Player
    demon: Demon


def _duplicate(existing: Record, privilege: Privilege) -> DuplicateSubmission:
    # Only approved records are public; anything else stays hidden from ordinary callers.
    visible = privilege >= Privilege.HELPER or existing.status == RecordStatus.APPROVED
    return DuplicateSubmission(existing.status.value, existing.id if visible else None)


async def _resolve_player(store: RecordStore, name: str, *, create: bool) -> Player:
    player = await store.find_player(name)
    if player is not None:
        return player
    if not create:
        # Dry runs must not write; an unknown player cannot have records anyway.
        return Player(name=name.strip(), banned=False)
    player = await store.create_player(name)
    logger.info("player_created", extra={"player_id": player.id, "player_name": player.name})
    return player


async def submit_record(
    store: RecordStore,
    submission: Submission,
    *,
    submitter_ip: str,
    privilege: Privilege = Privilege.PUBLIC,
    list_size: int | None = None,
    extended_list_size: int | None = None,
) -> Record | None:
    """Validate, deduplicate and insert a new record.

    Returns ``None`` for a verify-only submission that passed every check.
    """
    list_size = settings.list_size if list_size is None else list_size
    extended_list_size = settings.extended_list_size if extended_list_size is None else extended_list_size

    submitter: Submitter = await store.submitter_for_ip(submitter_ip)
    if submitter.banned:
        logger.warning("banned_submitter_refused", extra={"submitter_id": submitter.id})
        raise BannedFromSubmissions()

    video = normalize_video(submission.video) if submission.video is not None else None
    demon = await store.get_demon(submission.demon)
    player = await _resolve_player(store, submission.player, create=not submission.verify_only)

    if player.banned:
        raise PlayerBanned()

    check_submission_gates(
        demon=demon,
        progress=submission.progress,
        video=video,
        status=submission.status,
        privilege=privilege,
        list_size=list_size,
        extended_list_size=extended_list_size,
    )
    validate_progress(submission.progress, demon)

    dominated: list[Record] = []
    if player.id is not None:
        await store.lock_pair(player.id, demon.id)
        for existing in await store.records_for(player.id, demon.id):
            if existing.video == video:
                raise _duplicate(existing, privilege)
            if existing.status == RecordStatus.REJECTED:
                raise _duplicate(existing, privilege)
            if existing.status == submission.status and existing.progress < submission.progress:
                dominated.append(existing)
                continue
            if existing.status == submission.status or blocks_submission(existing, submission.progress):
                raise _duplicate(existing, privilege)

    if video is not None:
        elsewhere = await store.record_with_video(video)
        if elsewhere is not None:
            raise _duplicate(elsewhere, privilege)

    if submission.verify_only:
        logger.debug("submission_verified", extra={"player_name": player.name, "demon_id": demon.id})
        return None

    record = await store.insert_record(
        Record(
            progress=submission.progress,
            video=video,
            status=submission.status,
            player=player,
            demon=demon,
            submitter=submitter,
        )
    )

    if dominated:
        # Notes outlive the records they were written on.
        moved = await store.transfer_notes(dominated, record)
        await store.delete_records(dominated)
        for superseded in dominated:
            logger.info(
                "record_dominated_deleted",
                extra={"record_id": superseded.id, "progress": superseded.progress, "superseded_by": record.id},
            )
        if moved:
            logger.info("record_notes_transferred", extra={"record_id": record.id, "count": moved})

    if submission.note is not None and submission.note.strip():
        await store.add_note(record, submission.note)

    logger.info(
        "record_submitted",
        extra={
            "record_id": record.id,
            "player_id": player.id,
            "demon_id": demon.id,
            "progress": record.progress,
            "status": record.status.value,
        },
    )
    return record


async def patch_record(
    store: RecordStore,
    record: Record,
    patch: RecordPatch,
    *,
    privilege: Privilege,
) -> Record:
    """Apply ``patch`` to ``record`` and resolve collisions it creates.

    The record may collapse into a stronger record of its new
    (player, demon, status) bucket; weaker records of the pair are removed.
    """
    if patch.demon is not None and patch.demon_id is not None:
        raise MutuallyExclusive("demon", "demon_id")

    draft = _Draft(
        progress=record.progress,
        video=record.video,
        status=record.status,
        player=record.player,
        demon=record.demon,
    )

    demon_ref = patch.demon if patch.demon is not None else patch.demon_id
    if demon_ref is not None:
        draft.demon = await store.get_demon(demon_ref)
    if patch.player is not None:
        draft.player = await _resolve_player(store, patch.player, create=True)
    if patch.progress is not None:
        draft.progress = patch.progress
    if patch.clear_video:
        draft.video = None
    elif patch.video is not None:
        draft.video = normalize_video(patch.video)
    if patch.status is not None:
        check_transition(record.status, patch.status, privilege)
        draft.status = patch.status

    validate_progress(draft.progress, draft.demon)
    if draft.player.banned and draft.status != RecordStatus.REJECTED:
        raise PlayerBanned()

    pairs = sorted({(record.player.id, record.demon.id), (draft.player.id, draft.demon.id)})
    for player_id, demon_id in pairs:
        await store.lock_pair(player_id, demon_id)

    if draft.video is not None and draft.video != record.video:
        elsewhere = await store.record_with_video(draft.video)
        if elsewhere is not None and elsewhere.id != record.id:
            raise _duplicate(elsewhere, privilege)

    siblings = [
        other
        for other in await store.records_for(draft.player.id, draft.demon.id)
        if other.id != record.id
    ]

    same_bucket = [other for other in siblings if other.status == draft.status]
    strongest = max(same_bucket, key=lambda other: other.progress, default=None)
    if strongest is not None and strongest.progress > draft.progress:
        logger.info(
            "record_collapsed",
            extra={"record_id": record.id, "into_record_id": strongest.id, "progress": strongest.progress},
        )
        draft.progress = strongest.progress
        draft.video = strongest.video

    doomed = [
        other
        for other in siblings
        if other.status in (RecordStatus.APPROVED, draft.status) and other.progress <= draft.progress
    ]
    doomed_ids = {other.id for other in doomed}
    # A pair never holds two records with the same video, and "no video" counts as one.
    for survivor in siblings:
        if survivor.id not in doomed_ids and survivor.video == draft.video:
            raise _duplicate(survivor, privilege)

    if doomed:
        moved = await store.transfer_notes(doomed, record)
        await store.delete_records(doomed)
        logger.info(
            "record_dominated_deleted",
            extra={
                "record_id": record.id,
                "deleted_ids": sorted(doomed_ids),
                "notes_transferred": moved,
            },
        )

    record.progress = draft.progress
    record.video = draft.video
    record.status = draft.status
    record.player = draft.player
    record.demon = draft.demon
    await store.save_record(record)

    logger.info(
        "record_patched",
        extra={
            "record_id": record.id,
            "player_id": draft.player.id,
            "demon_id": draft.demon.id,
            "progress": draft.progress,
            "status": draft.status.value,
        },
    )
    return record


async def delete_record(store: RecordStore, record: Record) -> None:
    await store.delete_records([record])
    logger.info("record_deleted", extra={"record_id": record.id})

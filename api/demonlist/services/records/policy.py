"""Record status and submission policy.

The ``RecordStatus`` enum does not encode which transitions are legal; that
lives here so the rules can be read and tested in one place.
"""

from __future__ import annotations

from enum import IntEnum

from ...db.models import Demon, Record, RecordStatus
from ...errors import (
    InvalidProgress,
    MissingPermissions,
    Non100Extended,
    SubmitLegacy,
    TransitionNotAllowed,
    VideoRequired,
)


class Privilege(IntEnum):
    """Caller privilege levels, ordered so comparisons read naturally."""

    PUBLIC = 0
    HELPER = 1
    MODERATOR = 2


def transition_allowed(current: RecordStatus, target: RecordStatus, privilege: Privilege) -> bool:
    if current == target:
        return True
    if privilege >= Privilege.MODERATOR:
        return True
    if privilege >= Privilege.HELPER:
        # Re-opening a rejected record is a moderator decision.
        return current != RecordStatus.REJECTED
    return False


def check_transition(current: RecordStatus, target: RecordStatus, privilege: Privilege) -> None:
    if not transition_allowed(current, target, privilege):
        raise TransitionNotAllowed(current.value, target.value)


def submission_status_allowed(status: RecordStatus, privilege: Privilege) -> bool:
    return status == RecordStatus.SUBMITTED or privilege >= Privilege.HELPER


def check_submission_gates(
    *,
    demon: Demon,
    progress: int,
    video: str | None,
    status: RecordStatus,
    privilege: Privilege,
    list_size: int,
    extended_list_size: int,
) -> None:
    """Refuse submissions ordinary callers may not make.

    Gates apply in order: missing video, non-default status, legacy demon,
    non-100% record on the extended list. List team members skip all of them.
    """
    if privilege >= Privilege.HELPER:
        return
    if video is None:
        raise VideoRequired()
    if not submission_status_allowed(status, privilege):
        raise MissingPermissions("list helper")
    if demon.position > extended_list_size:
        raise SubmitLegacy()
    if demon.position > list_size and progress != 100:
        raise Non100Extended()


def validate_progress(progress: int, demon: Demon) -> None:
    if progress > 100 or progress < demon.requirement:
        raise InvalidProgress(demon.requirement)


def blocks_submission(existing: Record, progress: int) -> bool:
    """Whether ``existing`` (of a different status) conflicts with a new submission."""
    return existing.status == RecordStatus.UNDER_CONSIDERATION or existing.progress >= progress

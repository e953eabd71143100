"""Record lifecycle engine."""

from .lifecycle import RecordPatch, Submission, delete_record, patch_record, submit_record
from .policy import Privilege, transition_allowed
from .store import RecordStore, SqlRecordStore

__all__ = [
    "Privilege",
    "RecordPatch",
    "RecordStore",
    "SqlRecordStore",
    "Submission",
    "delete_record",
    "patch_record",
    "submit_record",
    "transition_allowed",
]

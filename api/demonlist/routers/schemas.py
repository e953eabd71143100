"""Request and response models shared by the API routers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..db.models import Record, RecordStatus
from ..utils.bounds import Int32


class PlayerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    banned: bool


class DemonResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    position: int
    requirement: int


class SubmitterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    banned: bool


class RecordResponse(BaseModel):
    id: int
    progress: int
    video: str | None
    status: RecordStatus
    player: PlayerResponse
    demon: DemonResponse
    submitter: int | None = None


def record_response(record: Record, *, show_submitter: bool) -> RecordResponse:
    return RecordResponse(
        id=record.id,
        progress=record.progress,
        video=record.video,
        status=record.status,
        player=PlayerResponse.model_validate(record.player),
        demon=DemonResponse.model_validate(record.demon),
        submitter=record.submitter.id if show_submitter and record.submitter is not None else None,
    )


class SubmissionRequest(BaseModel):
    progress: Int32
    player: str = Field(..., min_length=1, max_length=100)
    demon: Int32 | str
    video: str | None = None
    status: RecordStatus = RecordStatus.SUBMITTED
    note: str | None = None
    check: bool = False


class RecordPatchRequest(BaseModel):
    progress: Int32 | None = None
    video: str | None = None
    status: RecordStatus | None = None
    player: str | None = Field(None, min_length=1, max_length=100)
    demon: Int32 | str | None = None
    demon_id: Int32 | None = None

    @model_validator(mode="after")
    def _only_video_is_nullable(self) -> "RecordPatchRequest":
        for name in self.model_fields_set - {"video"}:
            if getattr(self, name) is None:
                raise ValueError(f"'{name}' cannot be null")
        return self


class NoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    transferred: bool

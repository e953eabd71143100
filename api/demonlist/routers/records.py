"""Record endpoints: listing, submission, retrieval, patching and deletion."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Path, Request, Response, status

from ..db import AsyncSession, get_db
from ..db.models import RecordStatus
from ..dependencies.auth import Caller, get_caller, require_helper, require_moderator
from ..errors import NotFound
from ..services.pagination import PaginationParameters
from ..services.pagination.resources import RecordFilters, RecordListing
from ..services.records import (
    RecordPatch,
    RecordStore,
    SqlRecordStore,
    Submission,
    delete_record,
    patch_record,
    submit_record,
)
from ..utils.bounds import INT32_MAX, INT32_MIN
from ..utils.etag import check_if_match, record_etag
from .pagination import paginated, pagination_params
from .schemas import (
    NoteResponse,
    RecordPatchRequest,
    RecordResponse,
    SubmissionRequest,
    record_response,
)

router = APIRouter(prefix="/api/v1/records", tags=["records"])

SUBMISSION_COUNT_HEADER = "X-Submission-Count"


def get_record_store(session: AsyncSession = Depends(get_db)) -> RecordStore:
    return SqlRecordStore(session)


def record_listing(
    filters: RecordFilters = Depends(),
    caller: Caller = Depends(get_caller),
    session: AsyncSession = Depends(get_db),
) -> RecordListing:
    return RecordListing(session, filters, caller.privilege)


@router.get("/", response_model=list[RecordResponse])
async def list_records(
    request: Request,
    response: Response,
    params: PaginationParameters = Depends(pagination_params),
    listing: RecordListing = Depends(record_listing),
    caller: Caller = Depends(get_caller),
) -> list[RecordResponse]:
    records = await paginated(listing, params, request, response)
    return [record_response(record, show_submitter=caller.is_helper) for record in records]


@router.post(
    "/",
    response_model=RecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={204: {"description": "Submission passed every check (check=true)"}},
)
async def submit(
    payload: SubmissionRequest,
    response: Response,
    caller: Caller = Depends(get_caller),
    store: RecordStore = Depends(get_record_store),
) -> RecordResponse | Response:
    """Submit a new record, or only validate it when ``check`` is set."""
    record = await submit_record(
        store,
        Submission(
            progress=payload.progress,
            player=payload.player,
            demon=payload.demon,
            video=payload.video,
            status=payload.status,
            note=payload.note,
            verify_only=payload.check,
        ),
        submitter_ip=caller.ip,
        privilege=caller.privilege,
    )
    if record is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    response.headers["ETag"] = record_etag(record)
    if record.status == RecordStatus.SUBMITTED:
        response.headers[SUBMISSION_COUNT_HEADER] = str(await store.submission_count())
    return record_response(record, show_submitter=caller.is_helper)


@router.get("/{record_id}", response_model=RecordResponse)
async def get_record(
    record_id: Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)],
    response: Response,
    caller: Caller = Depends(get_caller),
    store: RecordStore = Depends(get_record_store),
) -> RecordResponse:
    record = await store.get_record(record_id)
    if not caller.is_helper and record.status != RecordStatus.APPROVED:
        raise NotFound("record", id=record_id)
    response.headers["ETag"] = record_etag(record)
    return record_response(record, show_submitter=caller.is_helper)


@router.patch("/{record_id}", response_model=RecordResponse)
async def patch(
    record_id: Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)],
    payload: RecordPatchRequest,
    response: Response,
    if_match: str | None = Header(None, alias="If-Match"),
    caller: Caller = Depends(require_helper),
    store: RecordStore = Depends(get_record_store),
) -> RecordResponse:
    record = await store.get_record(record_id)
    check_if_match(if_match, record)

    changes = RecordPatch(
        progress=payload.progress,
        video=payload.video,
        clear_video="video" in payload.model_fields_set and payload.video is None,
        status=payload.status,
        player=payload.player,
        demon=payload.demon,
        demon_id=payload.demon_id,
    )
    record = await patch_record(store, record, changes, privilege=caller.privilege)

    response.headers["ETag"] = record_etag(record)
    return record_response(record, show_submitter=True)


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_moderator)],
)
async def delete(
    record_id: Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)],
    if_match: str | None = Header(None, alias="If-Match"),
    store: RecordStore = Depends(get_record_store),
) -> Response:
    record = await store.get_record(record_id)
    check_if_match(if_match, record, required=False)
    await delete_record(store, record)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{record_id}/notes",
    response_model=list[NoteResponse],
    dependencies=[Depends(require_helper)],
)
async def list_notes(
    record_id: Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)],
    store: RecordStore = Depends(get_record_store),
) -> list[NoteResponse]:
    record = await store.get_record(record_id)
    return [NoteResponse.model_validate(note) for note in await store.notes_for(record.id)]

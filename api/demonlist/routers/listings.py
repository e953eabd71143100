"""Player, demon and submitter endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, Response
from sqlalchemy import select

from ..db import AsyncSession, get_db
from ..db.models import Demon, Player
from ..dependencies.auth import Caller, get_caller, require_moderator
from ..errors import NotFound
from ..services.pagination import PaginationParameters
from ..services.pagination.resources import (
    DemonFilters,
    DemonListing,
    PlayerFilters,
    PlayerListing,
    SubmitterFilters,
    SubmitterListing,
)
from .pagination import paginated, pagination_params
from ..utils.bounds import INT32_MAX, INT32_MIN
from .schemas import DemonResponse, PlayerResponse, SubmitterResponse

router = APIRouter(prefix="/api/v1", tags=["listings"])


def player_listing(
    filters: PlayerFilters = Depends(),
    caller: Caller = Depends(get_caller),
    session: AsyncSession = Depends(get_db),
) -> PlayerListing:
    return PlayerListing(session, filters, caller.privilege)


def demon_listing(
    filters: DemonFilters = Depends(),
    session: AsyncSession = Depends(get_db),
) -> DemonListing:
    return DemonListing(session, filters)


def submitter_listing(
    filters: SubmitterFilters = Depends(),
    caller: Caller = Depends(require_moderator),
    session: AsyncSession = Depends(get_db),
) -> SubmitterListing:
    return SubmitterListing(session, filters, caller.privilege)


@router.get("/players/", response_model=list[PlayerResponse])
async def list_players(
    request: Request,
    response: Response,
    params: PaginationParameters = Depends(pagination_params),
    listing: PlayerListing = Depends(player_listing),
) -> list[PlayerResponse]:
    players = await paginated(listing, params, request, response)
    return [PlayerResponse.model_validate(player) for player in players]


@router.get("/players/{player_id}", response_model=PlayerResponse)
async def get_player(
    player_id: Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)],
    caller: Caller = Depends(get_caller),
    session: AsyncSession = Depends(get_db),
) -> PlayerResponse:
    player = await session.get(Player, player_id)
    # Banned players are hidden from the public the same way the listing hides them.
    if player is None or (player.banned and not caller.is_helper):
        raise NotFound("player", id=player_id)
    return PlayerResponse.model_validate(player)


@router.get("/demons/", response_model=list[DemonResponse])
async def list_demons(
    request: Request,
    response: Response,
    params: PaginationParameters = Depends(pagination_params),
    listing: DemonListing = Depends(demon_listing),
) -> list[DemonResponse]:
    demons = await paginated(listing, params, request, response)
    return [DemonResponse.model_validate(demon) for demon in demons]


@router.get("/demons/{position}", response_model=DemonResponse)
async def get_demon(
    position: Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)],
    session: AsyncSession = Depends(get_db),
) -> DemonResponse:
    result = await session.execute(select(Demon).where(Demon.position == position))
    demon = result.scalar_one_or_none()
    if demon is None:
        raise NotFound("demon", position=position)
    return DemonResponse.model_validate(demon)


@router.get("/submitters/", response_model=list[SubmitterResponse])
async def list_submitters(
    request: Request,
    response: Response,
    params: PaginationParameters = Depends(pagination_params),
    listing: SubmitterListing = Depends(submitter_listing),
) -> list[SubmitterResponse]:
    submitters = await paginated(listing, params, request, response)
    return [SubmitterResponse.model_validate(submitter) for submitter in submitters]

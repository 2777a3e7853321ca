from __future__ import annotations

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel

from app.db.session import SessionLocal
from app.game.scoreboard.service import ScoreboardService
from app.game.scoreboard.types import ScoreboardRow

from .internal_access import assert_internal_access
from .internal_errors import HANDLED_ERRORS, as_http_exception

router = APIRouter(tags=["internal", "scoreboard"])


class ScoreboardRowResponse(BaseModel):
    rank: int
    id: int
    name: str
    points: int
    game_coins: int | None = None
    members: int | None = None


class ScoreboardResponse(BaseModel):
    rows: list[ScoreboardRowResponse]


def _as_response(rows: list[ScoreboardRow]) -> ScoreboardResponse:
    return ScoreboardResponse(
        rows=[
            ScoreboardRowResponse(
                rank=row.rank,
                id=row.entity_id,
                name=row.name,
                points=row.points,
                game_coins=row.game_coins,
                members=row.members,
            )
            for row in rows
        ]
    )


@router.get("/internal/scoreboard/players", response_model=ScoreboardResponse)
async def players_scoreboard(
    request: Request,
    limit: int = Query(default=20, ge=1, le=200),
) -> ScoreboardResponse:
    assert_internal_access(request)

    async with SessionLocal.begin() as session:
        rows = await ScoreboardService.top_players(session, limit=limit)
    return _as_response(rows)


@router.get("/internal/scoreboard/campaigns/{campaign_id}", response_model=ScoreboardResponse)
async def campaign_scoreboard(
    campaign_id: int,
    request: Request,
    limit: int = Query(default=20, ge=1, le=200),
) -> ScoreboardResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            rows = await ScoreboardService.top_players_for_campaign(
                session,
                campaign_id=campaign_id,
                limit=limit,
            )
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return _as_response(rows)


@router.get("/internal/scoreboard/teams", response_model=ScoreboardResponse)
async def teams_scoreboard(
    request: Request,
    limit: int = Query(default=20, ge=1, le=200),
) -> ScoreboardResponse:
    assert_internal_access(request)

    async with SessionLocal.begin() as session:
        rows = await ScoreboardService.top_teams(session, limit=limit)
    return _as_response(rows)

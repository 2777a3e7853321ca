from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Query, Request, status

from app.db.models.campaigns import Campaign
from app.db.models.players import Player
from app.db.models.questions import Question
from app.db.repo.campaign_scores_repo import CampaignScoresRepo
from app.db.repo.ledger_repo import LedgerRepo
from app.db.repo.players_repo import PlayersRepo
from app.db.session import SessionLocal
from app.economy.adjustments.service import AdjustmentService
from app.game.campaigns.service import CampaignService
from app.game.errors import PlayerNotFoundError
from app.game.players.service import PlayerService

from .internal_access import assert_internal_access
from .internal_admin_models import (
    AdjustmentRequest,
    AdjustmentResponse,
    CampaignCreateRequest,
    CampaignListResponse,
    CampaignResponse,
    CampaignStatusUpdateRequest,
    CampaignUpdateRequest,
    EnrollPlayersRequest,
    EnrollPlayersResponse,
    LedgerEntryResponse,
    LedgerHistoryResponse,
    PlayerCreateRequest,
    PlayerListResponse,
    PlayerResponse,
    PlayerUpdateRequest,
    QuestionCreateRequest,
    QuestionListResponse,
    QuestionResponse,
    QuestionUpdateRequest,
    ReconciliationResponse,
    TeamAssignRequest,
    TeamCreateRequest,
    TeamListResponse,
    TeamResponse,
    TeamUpdateRequest,
)
from .internal_errors import HANDLED_ERRORS, as_http_exception

router = APIRouter(tags=["internal", "admin"])


def _campaign_as_response(campaign: Campaign) -> CampaignResponse:
    return CampaignResponse(
        id=int(campaign.id),
        name=campaign.name,
        status=campaign.status,
        start_date=campaign.start_date,
        end_date=campaign.end_date,
        timezone=campaign.timezone,
        next_day_index=int(campaign.next_day_index),
    )


def _question_as_response(question: Question) -> QuestionResponse:
    return QuestionResponse(
        id=int(question.id),
        campaign_id=int(question.campaign_id),
        text=question.text,
        choices=list(question.choices),
        answer=int(question.answer),
        day_index=question.day_index,
        points_on_time=int(question.points_on_time),
        points_late=int(question.points_late),
        schedule_time=question.schedule_time.strftime("%H:%M"),
        deadline_time=question.deadline_time.strftime("%H:%M"),
        is_special=bool(question.is_special),
        special_start_at=question.special_start_at,
        special_window_minutes=int(question.special_window_minutes),
    )


def _player_as_response(player: Player, *, campaign_scores: dict[int, int]) -> PlayerResponse:
    return PlayerResponse(
        id=int(player.id),
        name=player.name,
        role=player.role,
        status=player.status,
        score=int(player.score),
        game_coins=int(player.game_coins),
        team_id=player.team_id,
        campaign_scores=campaign_scores,
    )


@router.get("/internal/campaigns", response_model=CampaignListResponse)
async def list_campaigns(
    request: Request,
    campaign_status: str | None = Query(default=None, alias="status", max_length=16),
) -> CampaignListResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            campaigns = await CampaignService.list_campaigns(session, status=campaign_status)
            items = [_campaign_as_response(campaign) for campaign in campaigns]
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return CampaignListResponse(campaigns=items)


@router.post(
    "/internal/campaigns",
    response_model=CampaignResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_campaign(payload: CampaignCreateRequest, request: Request) -> CampaignResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            campaign = await CampaignService.create_campaign(
                session,
                name=payload.name,
                start_date=payload.start_date,
                end_date=payload.end_date,
                timezone=payload.timezone,
                status=payload.status,
            )
            response = _campaign_as_response(campaign)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return response


@router.put("/internal/campaigns/{campaign_id}", response_model=CampaignResponse)
async def update_campaign(
    campaign_id: int,
    payload: CampaignUpdateRequest,
    request: Request,
) -> CampaignResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            campaign = await CampaignService.update_campaign(
                session,
                campaign_id=campaign_id,
                name=payload.name,
                start_date=payload.start_date,
                end_date=payload.end_date,
                timezone=payload.timezone,
            )
            response = _campaign_as_response(campaign)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return response


@router.patch("/internal/campaigns/{campaign_id}/status", response_model=CampaignResponse)
async def update_campaign_status(
    campaign_id: int,
    payload: CampaignStatusUpdateRequest,
    request: Request,
) -> CampaignResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            campaign = await CampaignService.update_campaign_status(
                session,
                campaign_id=campaign_id,
                status=payload.status,
            )
            response = _campaign_as_response(campaign)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return response


@router.delete("/internal/campaigns/{campaign_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_campaign(campaign_id: int, request: Request) -> None:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            await CampaignService.delete_campaign(session, campaign_id=campaign_id)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc


@router.post("/internal/campaigns/{campaign_id}/players", response_model=EnrollPlayersResponse)
async def enroll_players(
    campaign_id: int,
    payload: EnrollPlayersRequest,
    request: Request,
) -> EnrollPlayersResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            player_ids = await CampaignService.enroll_players(
                session,
                campaign_id=campaign_id,
                player_ids=payload.player_ids,
            )
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return EnrollPlayersResponse(campaign_id=campaign_id, player_ids=player_ids)


@router.post(
    "/internal/campaigns/{campaign_id}/questions",
    response_model=QuestionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_question(
    campaign_id: int,
    payload: QuestionCreateRequest,
    request: Request,
) -> QuestionResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            question = await CampaignService.add_question(
                session,
                campaign_id=campaign_id,
                text=payload.text,
                choices=payload.choices,
                answer=payload.answer,
                points_on_time=payload.points_on_time,
                points_late=payload.points_late,
                schedule_time=payload.schedule_time,
                deadline_time=payload.deadline_time,
                is_special=payload.is_special,
                special_start_at=payload.special_start_at,
                special_window_minutes=payload.special_window_minutes,
            )
            response = _question_as_response(question)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return response


@router.get("/internal/campaigns/{campaign_id}/questions", response_model=QuestionListResponse)
async def list_questions(campaign_id: int, request: Request) -> QuestionListResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            questions = await CampaignService.list_questions(session, campaign_id=campaign_id)
            items = [_question_as_response(question) for question in questions]
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return QuestionListResponse(campaign_id=campaign_id, questions=items)


@router.put("/internal/questions/{question_id}", response_model=QuestionResponse)
async def update_question(
    question_id: int,
    payload: QuestionUpdateRequest,
    request: Request,
) -> QuestionResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            question = await CampaignService.update_question(
                session,
                question_id=question_id,
                text=payload.text,
                choices=payload.choices,
                answer=payload.answer,
                points_on_time=payload.points_on_time,
                points_late=payload.points_late,
                schedule_time=payload.schedule_time,
                deadline_time=payload.deadline_time,
                special_start_at=payload.special_start_at,
                special_window_minutes=payload.special_window_minutes,
            )
            response = _question_as_response(question)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return response


@router.delete("/internal/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(question_id: int, request: Request) -> None:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            await CampaignService.delete_question(session, question_id=question_id)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc


@router.get("/internal/players", response_model=PlayerListResponse)
async def list_players(
    request: Request,
    team_id: int | None = Query(default=None, gt=0),
) -> PlayerListResponse:
    assert_internal_access(request)

    async with SessionLocal.begin() as session:
        players = await PlayerService.list_players(session, team_id=team_id)
        items = [_player_as_response(player, campaign_scores={}) for player in players]
    return PlayerListResponse(players=items)


@router.post(
    "/internal/players",
    response_model=PlayerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_player(payload: PlayerCreateRequest, request: Request) -> PlayerResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            player = await PlayerService.create_player(
                session,
                name=payload.name,
                role=payload.role,
                team_id=payload.team_id,
            )
            response = _player_as_response(player, campaign_scores={})
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return response


@router.get("/internal/players/{player_id}", response_model=PlayerResponse)
async def get_player(player_id: int, request: Request) -> PlayerResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            player = await PlayersRepo.get_by_id(session, player_id)
            if player is None:
                raise PlayerNotFoundError
            campaign_scores = await CampaignScoresRepo.get_for_player(session, player_id=player_id)
            response = _player_as_response(player, campaign_scores=campaign_scores)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return response


@router.put("/internal/players/{player_id}", response_model=PlayerResponse)
async def update_player(
    player_id: int,
    payload: PlayerUpdateRequest,
    request: Request,
) -> PlayerResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            player = await PlayerService.update_player(
                session,
                player_id=player_id,
                name=payload.name,
                role=payload.role,
                status=payload.status,
                team_id=payload.team_id,
            )
            campaign_scores = await CampaignScoresRepo.get_for_player(session, player_id=player_id)
            response = _player_as_response(player, campaign_scores=campaign_scores)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return response


@router.delete("/internal/players/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_player(player_id: int, request: Request) -> None:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            await PlayerService.delete_player(session, player_id=player_id)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc


@router.put("/internal/players/{player_id}/team", status_code=status.HTTP_204_NO_CONTENT)
async def assign_team(player_id: int, payload: TeamAssignRequest, request: Request) -> None:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            await PlayerService.assign_team(session, player_id=player_id, team_id=payload.team_id)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc


@router.post(
    "/internal/teams",
    response_model=TeamResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_team(payload: TeamCreateRequest, request: Request) -> TeamResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            team = await PlayerService.create_team(session, name=payload.name)
            response = TeamResponse(id=int(team.id), name=team.name)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return response


@router.get("/internal/teams", response_model=TeamListResponse)
async def list_teams(request: Request) -> TeamListResponse:
    assert_internal_access(request)

    async with SessionLocal.begin() as session:
        rosters = await PlayerService.list_teams(session)
    return TeamListResponse(
        teams=[
            TeamResponse(id=roster.team_id, name=roster.name, member_ids=roster.member_ids)
            for roster in rosters
        ]
    )


@router.put("/internal/teams/{team_id}", response_model=TeamResponse)
async def update_team(team_id: int, payload: TeamUpdateRequest, request: Request) -> TeamResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            team = await PlayerService.update_team(session, team_id=team_id, name=payload.name)
            response = TeamResponse(id=int(team.id), name=team.name)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return response


@router.delete("/internal/teams/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_team(team_id: int, request: Request) -> None:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            await PlayerService.delete_team(session, team_id=team_id)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc


@router.post("/internal/players/{player_id}/adjustments", response_model=AdjustmentResponse)
async def award_points(
    player_id: int,
    payload: AdjustmentRequest,
    request: Request,
) -> AdjustmentResponse:
    assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await AdjustmentService.award_points(
                session,
                player_id=player_id,
                points=payload.points,
                reason=payload.reason,
                actor=payload.actor,
                idempotency_key=payload.idempotency_key,
                now_utc=now_utc,
            )
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc

    return AdjustmentResponse(
        ledger_entry_id=result.ledger_entry_id,
        player_id=result.player_id,
        points=result.points,
        score=result.score,
        game_coins=result.game_coins,
        created_at=result.created_at,
        idempotent_replay=result.idempotent_replay,
    )


@router.get("/internal/players/{player_id}/ledger", response_model=LedgerHistoryResponse)
async def list_player_ledger(
    player_id: int,
    request: Request,
    limit: int = Query(default=100, ge=1, le=500),
) -> LedgerHistoryResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            if await PlayersRepo.get_by_id(session, player_id) is None:
                raise PlayerNotFoundError
            entries = await LedgerRepo.list_for_player(session, player_id=player_id, limit=limit)
            items = [
                LedgerEntryResponse(
                    id=int(entry.id),
                    entry_type=entry.entry_type,
                    score_delta=int(entry.score_delta),
                    coins_delta=int(entry.coins_delta),
                    score_after=int(entry.score_after),
                    coins_after=int(entry.coins_after),
                    campaign_id=entry.campaign_id,
                    answer_id=entry.answer_id,
                    purchase_id=entry.purchase_id,
                    reason=entry.reason,
                    actor=entry.actor,
                    created_at=entry.created_at,
                )
                for entry in entries
            ]
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return LedgerHistoryResponse(player_id=player_id, entries=items)


@router.get("/internal/players/{player_id}/ledger/reconcile", response_model=ReconciliationResponse)
async def reconcile_player(player_id: int, request: Request) -> ReconciliationResponse:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            result = await AdjustmentService.reconcile_player(session, player_id=player_id)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc

    return ReconciliationResponse(
        player_id=result.player_id,
        score=result.score,
        game_coins=result.game_coins,
        ledger_score=result.ledger_score,
        ledger_coins=result.ledger_coins,
        answer_points=result.answer_points,
        adjustment_points=result.adjustment_points,
        is_consistent=result.is_consistent,
    )

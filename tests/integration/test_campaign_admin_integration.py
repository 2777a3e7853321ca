from __future__ import annotations

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.exc import DBAPIError

from app.db.models.answers import Answer
from app.db.models.ledger_entries import LedgerEntry
from app.db.models.players import Player
from app.db.models.questions import Question
from app.db.session import SessionLocal
from app.economy.adjustments.errors import (
    AdjustmentIdempotencyConflictError,
    AdjustmentInvalidError,
)
from app.economy.adjustments.service import AdjustmentService
from app.game.answers.service import AnswerService
from app.game.campaigns.service import CampaignService
from app.game.errors import CampaignNotFoundError
from app.game.players.service import PlayerService
from app.game.scoreboard.service import ScoreboardService
from tests.integration.campaign_fixtures import (
    _add_regular_question,
    _add_special_question,
    _create_campaign,
    _create_player,
    local_time,
)


async def _answer(player_id: int, question_id: int, campaign_id: int) -> None:
    async with SessionLocal.begin() as session:
        await AnswerService.submit_answer(
            session,
            player_id=player_id,
            question_id=question_id,
            campaign_id=campaign_id,
            selected_answer=1,
            now_utc=local_time(0, 9),
        )


async def _day_indexes(campaign_id: int) -> list[int | None]:
    async with SessionLocal.begin() as session:
        rows = await session.scalars(
            select(Question.day_index)
            .where(Question.campaign_id == campaign_id)
            .order_by(Question.id.asc())
        )
        return list(rows)


@pytest.mark.asyncio
async def test_day_index_counter_never_reuses_a_deleted_day() -> None:
    campaign_id = await _create_campaign()
    await _add_regular_question(campaign_id)
    second = await _add_regular_question(campaign_id)
    await _add_special_question(campaign_id, start_at=local_time(0, 15))

    async with SessionLocal.begin() as session:
        await CampaignService.delete_question(session, question_id=second)
    await _add_regular_question(campaign_id)

    assert await _day_indexes(campaign_id) == [0, None, 2]


@pytest.mark.asyncio
async def test_deleting_question_cascades_its_answers() -> None:
    player_id = await _create_player("Paula")
    campaign_id = await _create_campaign()
    question_id = await _add_regular_question(campaign_id)
    await _answer(player_id, question_id, campaign_id)

    async with SessionLocal.begin() as session:
        await CampaignService.delete_question(session, question_id=question_id)

    async with SessionLocal.begin() as session:
        assert await session.scalar(select(func.count(Answer.id))) == 0
        entry = await session.scalar(select(LedgerEntry).where(LedgerEntry.player_id == player_id))
        assert entry is not None
        assert entry.answer_id is None


@pytest.mark.asyncio
async def test_deleting_campaign_removes_questions_and_answers() -> None:
    player_id = await _create_player("Quim")
    campaign_id = await _create_campaign()
    question_id = await _add_regular_question(campaign_id)
    await _answer(player_id, question_id, campaign_id)

    async with SessionLocal.begin() as session:
        await CampaignService.delete_campaign(session, campaign_id=campaign_id)

    async with SessionLocal.begin() as session:
        assert await session.scalar(select(func.count(Question.id))) == 0
        assert await session.scalar(select(func.count(Answer.id))) == 0
        with pytest.raises(CampaignNotFoundError):
            await CampaignService.delete_campaign(session, campaign_id=campaign_id)


@pytest.mark.asyncio
async def test_adjustments_replay_on_same_key_and_conflict_on_different_payload() -> None:
    player_id = await _create_player("Rita")

    async with SessionLocal.begin() as session:
        first = await AdjustmentService.award_points(
            session,
            player_id=player_id,
            points=10,
            reason="helped a teammate",
            actor="ops",
            idempotency_key="bonus-1",
            now_utc=local_time(0, 12),
        )
    async with SessionLocal.begin() as session:
        replay = await AdjustmentService.award_points(
            session,
            player_id=player_id,
            points=10,
            reason="helped a teammate",
            actor="ops",
            idempotency_key="bonus-1",
            now_utc=local_time(0, 13),
        )

    assert first.idempotent_replay is False
    assert replay.idempotent_replay is True
    assert replay.ledger_entry_id == first.ledger_entry_id

    with pytest.raises(AdjustmentIdempotencyConflictError):
        async with SessionLocal.begin() as session:
            await AdjustmentService.award_points(
                session,
                player_id=player_id,
                points=-5,
                reason="late",
                actor="ops",
                idempotency_key="bonus-1",
                now_utc=local_time(0, 14),
            )

    with pytest.raises(AdjustmentInvalidError):
        async with SessionLocal.begin() as session:
            await AdjustmentService.award_points(
                session,
                player_id=player_id,
                points=-50,
                reason="penalty",
                actor="ops",
                idempotency_key="penalty-1",
                now_utc=local_time(0, 14),
            )

    async with SessionLocal.begin() as session:
        player = await session.get(Player, player_id)
        assert (player.score, player.game_coins) == (10, 10)


@pytest.mark.asyncio
async def test_reconcile_splits_answer_points_from_adjustments() -> None:
    player_id = await _create_player("Sara", coins=25)
    campaign_id = await _create_campaign()
    question_id = await _add_regular_question(campaign_id)
    await _answer(player_id, question_id, campaign_id)

    async with SessionLocal.begin() as session:
        result = await AdjustmentService.reconcile_player(session, player_id=player_id)

    assert result.is_consistent is True
    assert result.score == 1025
    assert result.answer_points == 1000
    assert result.adjustment_points == 25


@pytest.mark.asyncio
async def test_ledger_entries_reject_rewriting_deltas() -> None:
    player_id = await _create_player("Tito", coins=40)

    with pytest.raises(DBAPIError):
        async with SessionLocal.begin() as session:
            await session.execute(
                update(LedgerEntry)
                .where(LedgerEntry.player_id == player_id)
                .values(score_delta=4000)
            )

    async with SessionLocal.begin() as session:
        total = await session.scalar(
            select(func.sum(LedgerEntry.score_delta)).where(LedgerEntry.player_id == player_id)
        )
        assert total == 40


@pytest.mark.asyncio
async def test_scoreboards_rank_players_campaigns_and_teams() -> None:
    campaign_id = await _create_campaign()
    question_id = await _add_regular_question(campaign_id)
    leader = await _create_player("Uma")
    runner_up = await _create_player("Vito", coins=300)
    await _answer(leader, question_id, campaign_id)

    async with SessionLocal.begin() as session:
        team = await PlayerService.create_team(session, name="Blue")
        await PlayerService.assign_team(session, player_id=leader, team_id=team.id)
        await PlayerService.assign_team(session, player_id=runner_up, team_id=team.id)

    async with SessionLocal.begin() as session:
        overall = await ScoreboardService.top_players(session, limit=10)
        campaign_rows = await ScoreboardService.top_players_for_campaign(session, campaign_id=campaign_id)
        teams = await ScoreboardService.top_teams(session)

    assert [(row.rank, row.entity_id, row.points) for row in overall] == [
        (1, leader, 1000),
        (2, runner_up, 300),
    ]
    assert [(row.entity_id, row.points) for row in campaign_rows] == [(leader, 1000)]
    assert [(row.name, row.points, row.members) for row in teams] == [("Blue", 1300, 2)]

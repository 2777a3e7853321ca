from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.constraints import violated_constraint
from app.db.models.answers import Answer
from app.db.models.ledger_entries import LedgerEntry
from app.db.repo.answers_repo import AnswersRepo
from app.db.repo.campaign_scores_repo import CampaignScoresRepo
from app.db.repo.campaigns_repo import CampaignsRepo
from app.db.repo.ledger_repo import LedgerRepo
from app.db.repo.players_repo import PlayersRepo
from app.db.repo.questions_repo import QuestionsRepo
from app.game.answers.types import AnswerResult, VisibleQuestion
from app.game.campaigns.schedule import campaign_day_index
from app.game.errors import (
    AnswerAlreadySubmittedError,
    CampaignNotFoundError,
    PlayerNotFoundError,
    QuestionNotFoundError,
)
from app.game.questions.loading import as_campaign_clock, as_campaign_question
from app.game.questions.scoring import answer_window, evaluate_answer
from app.game.questions.visibility import resolve_visible_questions

logger = structlog.get_logger(__name__)

ANSWER_UNIQUE_CONSTRAINT = "uq_answers_player_question"


def _answer_reward_key(*, player_id: int, question_id: int) -> str:
    return f"answer:{player_id}:{question_id}"


async def get_visible_questions(
    session: AsyncSession,
    *,
    player_id: int,
    campaign_id: int,
    now_utc: datetime,
) -> list[VisibleQuestion]:
    campaign = await CampaignsRepo.get_by_id(session, campaign_id)
    if campaign is None:
        raise CampaignNotFoundError

    clock = as_campaign_clock(campaign)
    questions = [
        as_campaign_question(question)
        for question in await QuestionsRepo.list_for_campaign(session, campaign_id=campaign_id)
    ]
    answered_question_ids = await AnswersRepo.list_answered_question_ids(
        session,
        player_id=player_id,
        campaign_id=campaign_id,
    )
    visible = resolve_visible_questions(
        questions,
        answered_question_ids=answered_question_ids,
        day_index_now=campaign_day_index(
            start_date=clock.start_date,
            tz_name=clock.timezone,
            now_utc=now_utc,
        ),
        now_utc=now_utc,
    )

    views: list[VisibleQuestion] = []
    for question in visible:
        opens_at, closes_at = answer_window(question, clock=clock)
        views.append(VisibleQuestion(question=question, opens_at=opens_at, closes_at=closes_at))
    return views


async def submit_answer(
    session: AsyncSession,
    *,
    player_id: int,
    question_id: int,
    campaign_id: int,
    selected_answer: int,
    now_utc: datetime,
) -> AnswerResult:
    """Records one answer and credits its reward inside the caller's transaction.

    The player row lock serializes every balance change for the player, so the
    duplicate check below cannot interleave with a concurrent insert for the
    same pair. The unique constraint on (player_id, question_id) backs it up.
    """
    player = await PlayersRepo.get_by_id_for_update(session, player_id)

    existing = await AnswersRepo.get_for_player_question(
        session,
        player_id=player_id,
        question_id=question_id,
    )
    if existing is not None:
        raise AnswerAlreadySubmittedError

    question = await QuestionsRepo.get_by_id(session, question_id)
    if question is None or question.campaign_id != campaign_id:
        raise QuestionNotFoundError

    campaign = None
    if not question.is_special:
        campaign = await CampaignsRepo.get_by_id(session, campaign_id)
        if campaign is None:
            raise CampaignNotFoundError

    if player is None:
        raise PlayerNotFoundError

    evaluation = evaluate_answer(
        as_campaign_question(question),
        selected_option=selected_answer,
        answered_at=now_utc,
        clock=as_campaign_clock(campaign) if campaign is not None else None,
    )

    try:
        answer = await AnswersRepo.create(
            session,
            answer=Answer(
                player_id=player_id,
                question_id=question_id,
                campaign_id=campaign_id,
                selected_answer=selected_answer,
                answered_at=now_utc,
                is_on_time=evaluation.is_on_time,
                is_correct=evaluation.is_correct,
                points_earned=evaluation.points_earned,
            ),
        )
    except IntegrityError as exc:
        if violated_constraint(exc) == ANSWER_UNIQUE_CONSTRAINT:
            raise AnswerAlreadySubmittedError from exc
        raise

    player.score += evaluation.points_earned
    player.game_coins += evaluation.points_earned
    campaign_score = await CampaignScoresRepo.add_points(
        session,
        player_id=player_id,
        campaign_id=campaign_id,
        points=evaluation.points_earned,
        now_utc=now_utc,
    )
    if evaluation.points_earned > 0:
        await LedgerRepo.create(
            session,
            entry=LedgerEntry(
                player_id=player_id,
                entry_type="ANSWER_REWARD",
                score_delta=evaluation.points_earned,
                coins_delta=evaluation.points_earned,
                score_after=player.score,
                coins_after=player.game_coins,
                campaign_id=campaign_id,
                answer_id=answer.id,
                idempotency_key=_answer_reward_key(player_id=player_id, question_id=question_id),
                metadata_={
                    "is_on_time": evaluation.is_on_time,
                    "is_correct": evaluation.is_correct,
                },
                created_at=now_utc,
            ),
        )

    logger.info(
        "answer_submitted",
        player_id=player_id,
        question_id=question_id,
        campaign_id=campaign_id,
        is_special=question.is_special,
        is_on_time=evaluation.is_on_time,
        is_correct=evaluation.is_correct,
        points_earned=evaluation.points_earned,
    )

    return AnswerResult(
        answer_id=int(answer.id),
        player_id=player_id,
        question_id=question_id,
        campaign_id=campaign_id,
        selected_answer=selected_answer,
        answered_at=now_utc,
        is_on_time=evaluation.is_on_time,
        is_correct=evaluation.is_correct,
        points_earned=evaluation.points_earned,
        score=int(player.score),
        game_coins=int(player.game_coins),
        campaign_score=campaign_score,
    )


class AnswerService:
    get_visible_questions = staticmethod(get_visible_questions)
    submit_answer = staticmethod(submit_answer)

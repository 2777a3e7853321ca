from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from app.db.session import SessionLocal
from app.game.answers.service import AnswerService
from app.game.answers.types import AnswerResult, VisibleQuestion

from .internal_access import assert_internal_access
from .internal_errors import HANDLED_ERRORS, as_http_exception
from .internal_play_models import (
    SubmitAnswerRequest,
    SubmitAnswerResponse,
    VisibleQuestionResponse,
    VisibleQuestionsResponse,
)

router = APIRouter(tags=["internal", "play"])


def _visible_as_response(view: VisibleQuestion) -> VisibleQuestionResponse:
    question = view.question
    return VisibleQuestionResponse(
        question_id=question.question_id,
        campaign_id=question.campaign_id,
        text=question.text,
        choices=list(question.choices),
        points_on_time=question.points_on_time,
        points_late=question.points_late,
        day_index=question.day_index,
        is_special=question.is_special,
        special_start_at=question.special_start_at,
        special_window_minutes=question.special_window_minutes,
        opens_at=view.opens_at,
        closes_at=view.closes_at,
    )


def _answer_as_response(result: AnswerResult) -> SubmitAnswerResponse:
    return SubmitAnswerResponse(
        answer_id=result.answer_id,
        player_id=result.player_id,
        question_id=result.question_id,
        campaign_id=result.campaign_id,
        selected_answer=result.selected_answer,
        answered_at=result.answered_at,
        is_on_time=result.is_on_time,
        is_correct=result.is_correct,
        points_earned=result.points_earned,
        score=result.score,
        game_coins=result.game_coins,
        campaign_score=result.campaign_score,
    )


@router.get(
    "/internal/campaigns/{campaign_id}/players/{player_id}/visible-questions",
    response_model=VisibleQuestionsResponse,
)
async def get_visible_questions(
    campaign_id: int,
    player_id: int,
    request: Request,
) -> VisibleQuestionsResponse:
    assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            views = await AnswerService.get_visible_questions(
                session,
                player_id=player_id,
                campaign_id=campaign_id,
                now_utc=now_utc,
            )
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc

    return VisibleQuestionsResponse(
        player_id=player_id,
        campaign_id=campaign_id,
        generated_at=now_utc,
        questions=[_visible_as_response(view) for view in views],
    )


@router.post("/internal/answers", response_model=SubmitAnswerResponse)
async def submit_answer(payload: SubmitAnswerRequest, request: Request) -> SubmitAnswerResponse:
    assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await AnswerService.submit_answer(
                session,
                player_id=payload.player_id,
                question_id=payload.question_id,
                campaign_id=payload.campaign_id,
                selected_answer=payload.selected_answer,
                now_utc=now_utc,
            )
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc

    return _answer_as_response(result)

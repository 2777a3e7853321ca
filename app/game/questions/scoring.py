from __future__ import annotations

from datetime import datetime

from app.game.campaigns.schedule import regular_window, special_window
from app.game.errors import InvalidAnswerOptionError
from app.game.questions.constants import (
    WRONG_REGULAR_LATE_POINTS,
    WRONG_REGULAR_ON_TIME_POINTS,
    WRONG_SPECIAL_LATE_POINTS,
    WRONG_SPECIAL_ON_TIME_POINTS,
)
from app.game.questions.types import AnswerEvaluation, CampaignClock, CampaignQuestion


def answer_window(
    question: CampaignQuestion,
    *,
    clock: CampaignClock | None,
) -> tuple[datetime, datetime]:
    """Returns the inclusive (open_at, close_at) UTC window of a question."""
    if question.is_special:
        if question.special_start_at is None:
            raise ValueError("special question without special_start_at")
        return special_window(
            special_start_at=question.special_start_at,
            window_minutes=question.special_window_minutes,
        )

    if clock is None or question.day_index is None:
        raise ValueError("regular question needs a campaign clock and a day index")
    return regular_window(
        start_date=clock.start_date,
        tz_name=clock.timezone,
        day_index=question.day_index,
        schedule_time=question.schedule_time,
        deadline_time=question.deadline_time,
    )


def is_answer_on_time(
    question: CampaignQuestion,
    *,
    answered_at: datetime,
    clock: CampaignClock | None,
) -> bool:
    open_at, close_at = answer_window(question, clock=clock)
    return open_at <= answered_at <= close_at


def points_for(question: CampaignQuestion, *, is_correct: bool, is_on_time: bool) -> int:
    if is_correct:
        return question.points_on_time if is_on_time else question.points_late
    if question.is_special:
        return WRONG_SPECIAL_ON_TIME_POINTS if is_on_time else WRONG_SPECIAL_LATE_POINTS
    return WRONG_REGULAR_ON_TIME_POINTS if is_on_time else WRONG_REGULAR_LATE_POINTS


def evaluate_answer(
    question: CampaignQuestion,
    *,
    selected_option: int,
    answered_at: datetime,
    clock: CampaignClock | None,
) -> AnswerEvaluation:
    """Scores a submission. Late submissions are scored, never rejected."""
    if selected_option < 0 or selected_option >= len(question.choices):
        raise InvalidAnswerOptionError

    is_on_time = is_answer_on_time(question, answered_at=answered_at, clock=clock)
    is_correct = selected_option == question.correct_option
    return AnswerEvaluation(
        is_on_time=is_on_time,
        is_correct=is_correct,
        points_earned=points_for(question, is_correct=is_correct, is_on_time=is_on_time),
    )

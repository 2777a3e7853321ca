from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from app.game.errors import InvalidAnswerOptionError
from app.game.questions.scoring import answer_window, evaluate_answer
from app.game.questions.types import CampaignClock, CampaignQuestion

UTC = timezone.utc
CLOCK = CampaignClock(start_date=date(2026, 3, 2), timezone="America/Sao_Paulo")
SPECIAL_START = datetime(2026, 3, 4, 15, 0, tzinfo=UTC)


def regular_question(**overrides) -> CampaignQuestion:
    fields = {
        "question_id": 11,
        "campaign_id": 1,
        "text": "Which planet is largest?",
        "choices": ("Mars", "Jupiter", "Venus"),
        "correct_option": 1,
        "points_on_time": 100,
        "points_late": 50,
        "day_index": 0,
    }
    fields.update(overrides)
    return CampaignQuestion(**fields)


def special_question(**overrides) -> CampaignQuestion:
    fields = {
        "question_id": 21,
        "campaign_id": 1,
        "text": "Flash round",
        "choices": ("A", "B"),
        "correct_option": 0,
        "points_on_time": 2000,
        "points_late": 800,
        "is_special": True,
        "special_start_at": SPECIAL_START,
    }
    fields.update(overrides)
    return CampaignQuestion(**fields)


def local(hour: int, minute: int = 0) -> datetime:
    # Campaign day 0 in Sao Paulo (UTC-3).
    return datetime(2026, 3, 2, hour + 3, minute, tzinfo=UTC)


@pytest.mark.parametrize(
    ("answered_at", "selected", "on_time", "correct", "points"),
    [
        (local(10), 1, True, True, 100),
        (local(20), 1, False, True, 50),
        (local(10), 0, True, False, 300),
        (local(20), 2, False, False, 150),
    ],
)
def test_regular_question_reward_table(
    answered_at: datetime,
    selected: int,
    on_time: bool,
    correct: bool,
    points: int,
) -> None:
    result = evaluate_answer(
        regular_question(),
        selected_option=selected,
        answered_at=answered_at,
        clock=CLOCK,
    )

    assert result.is_on_time is on_time
    assert result.is_correct is correct
    assert result.points_earned == points


@pytest.mark.parametrize(
    ("offset", "selected", "on_time", "points"),
    [
        (timedelta(seconds=30), 0, True, 2000),
        (timedelta(seconds=90), 0, False, 800),
        (timedelta(seconds=30), 1, True, 600),
        (timedelta(seconds=90), 1, False, 300),
    ],
)
def test_special_question_reward_table(
    offset: timedelta,
    selected: int,
    on_time: bool,
    points: int,
) -> None:
    result = evaluate_answer(
        special_question(),
        selected_option=selected,
        answered_at=SPECIAL_START + offset,
        clock=None,
    )

    assert result.is_on_time is on_time
    assert result.points_earned == points


def test_window_bounds_are_inclusive() -> None:
    question = regular_question()

    at_open = evaluate_answer(question, selected_option=1, answered_at=local(8), clock=CLOCK)
    at_close = evaluate_answer(question, selected_option=1, answered_at=local(18), clock=CLOCK)
    after_close = evaluate_answer(
        question,
        selected_option=1,
        answered_at=local(18) + timedelta(seconds=1),
        clock=CLOCK,
    )

    assert at_open.is_on_time is True
    assert at_close.is_on_time is True
    assert after_close.is_on_time is False


def test_answer_before_opening_is_not_on_time() -> None:
    result = evaluate_answer(regular_question(), selected_option=1, answered_at=local(7), clock=CLOCK)

    assert result.is_on_time is False
    assert result.points_earned == 50


def test_wrong_answer_tiers_ignore_configured_points() -> None:
    question = regular_question(points_on_time=5000, points_late=10)

    result = evaluate_answer(question, selected_option=0, answered_at=local(9), clock=CLOCK)

    assert result.points_earned == 300


def test_answer_window_uses_question_day_and_wall_clock() -> None:
    open_at, close_at = answer_window(regular_question(day_index=3), clock=CLOCK)

    assert open_at == datetime(2026, 3, 5, 11, 0, tzinfo=UTC)
    assert close_at == datetime(2026, 3, 5, 21, 0, tzinfo=UTC)


@pytest.mark.parametrize("selected", [-1, 3, 4])
def test_out_of_range_option_is_rejected(selected: int) -> None:
    with pytest.raises(InvalidAnswerOptionError):
        evaluate_answer(regular_question(), selected_option=selected, answered_at=local(10), clock=CLOCK)


def test_regular_question_without_clock_is_a_programming_error() -> None:
    with pytest.raises(ValueError):
        answer_window(regular_question(), clock=None)

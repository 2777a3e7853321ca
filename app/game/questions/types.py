from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time

from app.game.campaigns.constants import (
    DEFAULT_DEADLINE_TIME,
    DEFAULT_SCHEDULE_TIME,
    DEFAULT_SPECIAL_WINDOW_MINUTES,
)


@dataclass(slots=True, frozen=True)
class CampaignQuestion:
    question_id: int
    campaign_id: int
    text: str
    choices: tuple[str, ...]
    correct_option: int
    points_on_time: int
    points_late: int
    day_index: int | None = None
    schedule_time: time = DEFAULT_SCHEDULE_TIME
    deadline_time: time = DEFAULT_DEADLINE_TIME
    is_special: bool = False
    special_start_at: datetime | None = None
    special_window_minutes: int = DEFAULT_SPECIAL_WINDOW_MINUTES


@dataclass(slots=True, frozen=True)
class CampaignClock:
    start_date: date
    timezone: str


@dataclass(slots=True, frozen=True)
class AnswerEvaluation:
    is_on_time: bool
    is_correct: bool
    points_earned: int

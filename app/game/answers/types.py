from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.game.questions.types import CampaignQuestion


@dataclass(slots=True)
class AnswerResult:
    answer_id: int
    player_id: int
    question_id: int
    campaign_id: int
    selected_answer: int
    answered_at: datetime
    is_on_time: bool
    is_correct: bool
    points_earned: int
    score: int
    game_coins: int
    campaign_score: int


@dataclass(slots=True)
class VisibleQuestion:
    question: CampaignQuestion
    opens_at: datetime
    closes_at: datetime

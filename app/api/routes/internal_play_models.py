from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class VisibleQuestionResponse(BaseModel):
    question_id: int
    campaign_id: int
    text: str
    choices: list[str]
    points_on_time: int
    points_late: int
    day_index: int | None = None
    is_special: bool
    special_start_at: datetime | None = None
    special_window_minutes: int
    opens_at: datetime
    closes_at: datetime


class VisibleQuestionsResponse(BaseModel):
    player_id: int
    campaign_id: int
    generated_at: datetime
    questions: list[VisibleQuestionResponse]


class SubmitAnswerRequest(BaseModel):
    player_id: int = Field(gt=0)
    question_id: int = Field(gt=0)
    campaign_id: int = Field(gt=0)
    selected_answer: int = Field(ge=0, le=3)


class SubmitAnswerResponse(BaseModel):
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

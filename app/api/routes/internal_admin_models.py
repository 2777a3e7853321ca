from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field


class CampaignCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    start_date: date
    end_date: date
    timezone: str | None = Field(default=None, max_length=64)
    status: str = Field(default="PLANNED", max_length=16)


class CampaignUpdateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    start_date: date
    end_date: date
    timezone: str | None = Field(default=None, max_length=64)


class CampaignStatusUpdateRequest(BaseModel):
    status: str = Field(min_length=1, max_length=16)


class CampaignResponse(BaseModel):
    id: int
    name: str
    status: str
    start_date: date
    end_date: date
    timezone: str
    next_day_index: int


class CampaignListResponse(BaseModel):
    campaigns: list[CampaignResponse]


class EnrollPlayersRequest(BaseModel):
    player_ids: list[int] = Field(min_length=1, max_length=1000)


class EnrollPlayersResponse(BaseModel):
    campaign_id: int
    player_ids: list[int]


class QuestionCreateRequest(BaseModel):
    text: str = Field(min_length=1, max_length=2048)
    choices: list[str] = Field(min_length=2, max_length=4)
    answer: int = Field(ge=0, le=3)
    points_on_time: int = Field(default=1000, ge=0)
    points_late: int = Field(default=500, ge=0)
    schedule_time: str = Field(default="08:00", max_length=8)
    deadline_time: str = Field(default="18:00", max_length=8)
    is_special: bool = False
    special_start_at: datetime | None = None
    special_window_minutes: int = Field(default=1, gt=0, le=1440)


class QuestionUpdateRequest(BaseModel):
    text: str = Field(min_length=1, max_length=2048)
    choices: list[str] = Field(min_length=2, max_length=4)
    answer: int = Field(ge=0, le=3)
    points_on_time: int = Field(ge=0)
    points_late: int = Field(ge=0)
    schedule_time: str = Field(default="08:00", max_length=8)
    deadline_time: str = Field(default="18:00", max_length=8)
    special_start_at: datetime | None = None
    special_window_minutes: int = Field(default=1, gt=0, le=1440)


class QuestionResponse(BaseModel):
    id: int
    campaign_id: int
    text: str
    choices: list[str]
    answer: int
    day_index: int | None = None
    points_on_time: int
    points_late: int
    schedule_time: str
    deadline_time: str
    is_special: bool
    special_start_at: datetime | None = None
    special_window_minutes: int


class QuestionListResponse(BaseModel):
    campaign_id: int
    questions: list[QuestionResponse]


class PlayerCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    role: str | None = Field(default=None, max_length=64)
    team_id: int | None = Field(default=None, gt=0)


class PlayerUpdateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    role: str | None = Field(default=None, max_length=64)
    status: str = Field(default="ACTIVE", max_length=16)
    team_id: int | None = Field(default=None, gt=0)


class PlayerResponse(BaseModel):
    id: int
    name: str
    role: str | None = None
    status: str
    score: int
    game_coins: int
    team_id: int | None = None
    campaign_scores: dict[int, int] = Field(default_factory=dict)


class PlayerListResponse(BaseModel):
    players: list[PlayerResponse]


class TeamCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)


class TeamUpdateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)


class TeamResponse(BaseModel):
    id: int
    name: str
    member_ids: list[int] = Field(default_factory=list)


class TeamListResponse(BaseModel):
    teams: list[TeamResponse]


class TeamAssignRequest(BaseModel):
    team_id: int | None = Field(default=None, gt=0)


class AdjustmentRequest(BaseModel):
    points: int
    reason: str = Field(min_length=1, max_length=256)
    actor: str = Field(min_length=1, max_length=64)
    idempotency_key: str = Field(min_length=1, max_length=80)


class AdjustmentResponse(BaseModel):
    ledger_entry_id: int
    player_id: int
    points: int
    score: int
    game_coins: int
    created_at: datetime
    idempotent_replay: bool


class ReconciliationResponse(BaseModel):
    player_id: int
    score: int
    game_coins: int
    ledger_score: int
    ledger_coins: int
    answer_points: int
    adjustment_points: int
    is_consistent: bool


class LedgerEntryResponse(BaseModel):
    id: int
    entry_type: str
    score_delta: int
    coins_delta: int
    score_after: int
    coins_after: int
    campaign_id: int | None = None
    answer_id: int | None = None
    purchase_id: int | None = None
    reason: str | None = None
    actor: str | None = None
    created_at: datetime


class LedgerHistoryResponse(BaseModel):
    player_id: int
    entries: list[LedgerEntryResponse]

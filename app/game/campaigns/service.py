from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, time

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.models.campaigns import Campaign
from app.db.models.questions import Question
from app.db.repo.campaigns_repo import CampaignsRepo
from app.db.repo.players_repo import PlayersRepo
from app.db.repo.questions_repo import QuestionsRepo
from app.game.campaigns.constants import (
    CAMPAIGN_STATUSES,
    DEFAULT_DEADLINE_TIME,
    DEFAULT_POINTS_LATE,
    DEFAULT_POINTS_ON_TIME,
    DEFAULT_SCHEDULE_TIME,
    DEFAULT_SPECIAL_WINDOW_MINUTES,
    MAX_CHOICES,
    MIN_CHOICES,
)
from app.game.campaigns.schedule import parse_wall_clock, resolve_timezone
from app.game.errors import (
    CampaignNotFoundError,
    CampaignValidationError,
    PlayerNotFoundError,
    QuestionNotFoundError,
)

logger = structlog.get_logger(__name__)


def _validate_timezone(name: str) -> str:
    try:
        resolve_timezone(name)
    except ValueError as exc:
        raise CampaignValidationError(str(exc)) from exc
    return name


def _validate_status(status: str) -> str:
    if status not in CAMPAIGN_STATUSES:
        raise CampaignValidationError(f"unknown campaign status: {status!r}")
    return status


def _validate_wall_clock(value: str | time, *, field: str) -> time:
    try:
        return parse_wall_clock(value)
    except ValueError as exc:
        raise CampaignValidationError(f"{field}: {exc}") from exc


def _validate_daily_window(schedule_time: str | time, deadline_time: str | time) -> tuple[time, time]:
    opens = _validate_wall_clock(schedule_time, field="schedule_time")
    closes = _validate_wall_clock(deadline_time, field="deadline_time")
    if opens > closes:
        raise CampaignValidationError("schedule_time must not be after deadline_time")
    return opens, closes


def _validate_campaign_fields(*, name: str, start_date: date, end_date: date) -> None:
    if not name.strip():
        raise CampaignValidationError("campaign name must not be blank")
    if start_date > end_date:
        raise CampaignValidationError("start_date must not be after end_date")


def validate_question_shape(
    *,
    choices: Sequence[str],
    answer: int,
    points_on_time: int,
    points_late: int,
    is_special: bool,
    special_start_at: datetime | None,
    special_window_minutes: int,
) -> None:
    if not MIN_CHOICES <= len(choices) <= MAX_CHOICES:
        raise CampaignValidationError(
            f"a question needs between {MIN_CHOICES} and {MAX_CHOICES} choices"
        )
    if any(not str(choice).strip() for choice in choices):
        raise CampaignValidationError("choices must not be blank")
    if not 0 <= answer < len(choices):
        raise CampaignValidationError("answer must index one of the choices")
    if points_on_time < 0 or points_late < 0:
        raise CampaignValidationError("points must not be negative")
    if is_special:
        if special_start_at is None:
            raise CampaignValidationError("special questions need special_start_at")
        if special_start_at.tzinfo is None:
            raise CampaignValidationError("special_start_at must carry a timezone offset")
        if special_window_minutes <= 0:
            raise CampaignValidationError("special_window_minutes must be positive")


async def create_campaign(
    session: AsyncSession,
    *,
    name: str,
    start_date: date,
    end_date: date,
    timezone: str | None = None,
    status: str = "PLANNED",
) -> Campaign:
    _validate_campaign_fields(name=name, start_date=start_date, end_date=end_date)

    campaign = await CampaignsRepo.create(
        session,
        name=name.strip(),
        start_date=start_date,
        end_date=end_date,
        timezone=_validate_timezone(timezone or get_settings().default_campaign_timezone),
        status=_validate_status(status),
    )
    logger.info("campaign_created", campaign_id=campaign.id, start_date=str(start_date))
    return campaign


async def list_campaigns(session: AsyncSession, *, status: str | None = None) -> list[Campaign]:
    if status is not None:
        _validate_status(status)
    return await CampaignsRepo.list_all(session, status=status)


async def update_campaign(
    session: AsyncSession,
    *,
    campaign_id: int,
    name: str,
    start_date: date,
    end_date: date,
    timezone: str | None = None,
) -> Campaign:
    """Edits name, dates and timezone; status and the day counter stay as they are.

    Moving the start date moves every regular question's calendar day with it.
    """
    _validate_campaign_fields(name=name, start_date=start_date, end_date=end_date)
    campaign = await CampaignsRepo.get_by_id_for_update(session, campaign_id)
    if campaign is None:
        raise CampaignNotFoundError

    campaign.name = name.strip()
    campaign.start_date = start_date
    campaign.end_date = end_date
    if timezone is not None:
        campaign.timezone = _validate_timezone(timezone)
    await session.flush()
    logger.info("campaign_updated", campaign_id=campaign_id, start_date=str(start_date))
    return campaign


async def update_campaign_status(
    session: AsyncSession,
    *,
    campaign_id: int,
    status: str,
) -> Campaign:
    campaign = await CampaignsRepo.get_by_id_for_update(session, campaign_id)
    if campaign is None:
        raise CampaignNotFoundError
    campaign.status = _validate_status(status)
    await session.flush()
    return campaign


async def delete_campaign(session: AsyncSession, *, campaign_id: int) -> None:
    deleted = await CampaignsRepo.delete(session, campaign_id=campaign_id)
    if deleted == 0:
        raise CampaignNotFoundError
    logger.info("campaign_deleted", campaign_id=campaign_id)


async def enroll_players(
    session: AsyncSession,
    *,
    campaign_id: int,
    player_ids: Sequence[int],
) -> list[int]:
    campaign = await CampaignsRepo.get_by_id(session, campaign_id)
    if campaign is None:
        raise CampaignNotFoundError

    players = await PlayersRepo.list_by_ids(session, player_ids)
    if len(players) != len(set(player_ids)):
        raise PlayerNotFoundError

    await CampaignsRepo.enroll_players(session, campaign_id=campaign_id, player_ids=player_ids)
    return await CampaignsRepo.list_player_ids(session, campaign_id=campaign_id)


async def add_question(
    session: AsyncSession,
    *,
    campaign_id: int,
    text: str,
    choices: Sequence[str],
    answer: int,
    points_on_time: int = DEFAULT_POINTS_ON_TIME,
    points_late: int = DEFAULT_POINTS_LATE,
    schedule_time: str | time = DEFAULT_SCHEDULE_TIME,
    deadline_time: str | time = DEFAULT_DEADLINE_TIME,
    is_special: bool = False,
    special_start_at: datetime | None = None,
    special_window_minutes: int = DEFAULT_SPECIAL_WINDOW_MINUTES,
) -> Question:
    """Adds a question; regular questions take the campaign's next free day.

    The day counter only grows, so a deleted question's day is never handed out
    again.
    """
    if not text.strip():
        raise CampaignValidationError("question text must not be blank")
    validate_question_shape(
        choices=choices,
        answer=answer,
        points_on_time=points_on_time,
        points_late=points_late,
        is_special=is_special,
        special_start_at=special_start_at,
        special_window_minutes=special_window_minutes,
    )
    opens, closes = _validate_daily_window(schedule_time, deadline_time)

    campaign = await CampaignsRepo.get_by_id_for_update(session, campaign_id)
    if campaign is None:
        raise CampaignNotFoundError

    day_index: int | None = None
    if not is_special:
        day_index = campaign.next_day_index
        campaign.next_day_index = day_index + 1

    question = await QuestionsRepo.create(
        session,
        question=Question(
            campaign_id=campaign_id,
            text=text.strip(),
            choices=[str(choice) for choice in choices],
            answer=answer,
            day_index=day_index,
            points_on_time=points_on_time,
            points_late=points_late,
            schedule_time=opens,
            deadline_time=closes,
            is_special=is_special,
            special_start_at=special_start_at if is_special else None,
            special_window_minutes=special_window_minutes,
        ),
    )
    logger.info(
        "question_added",
        campaign_id=campaign_id,
        question_id=question.id,
        day_index=day_index,
        is_special=is_special,
    )
    return question


async def list_questions(session: AsyncSession, *, campaign_id: int) -> list[Question]:
    if await CampaignsRepo.get_by_id(session, campaign_id) is None:
        raise CampaignNotFoundError
    return await QuestionsRepo.list_for_campaign(session, campaign_id=campaign_id)


async def update_question(
    session: AsyncSession,
    *,
    question_id: int,
    text: str,
    choices: Sequence[str],
    answer: int,
    points_on_time: int,
    points_late: int,
    schedule_time: str | time = DEFAULT_SCHEDULE_TIME,
    deadline_time: str | time = DEFAULT_DEADLINE_TIME,
    special_start_at: datetime | None = None,
    special_window_minutes: int = DEFAULT_SPECIAL_WINDOW_MINUTES,
) -> Question:
    """Edits a question in place.

    The kind (regular or special) and ``day_index`` never change. Answers
    already recorded keep the points they earned.
    """
    if not text.strip():
        raise CampaignValidationError("question text must not be blank")
    question = await QuestionsRepo.get_by_id_for_update(session, question_id)
    if question is None:
        raise QuestionNotFoundError

    validate_question_shape(
        choices=choices,
        answer=answer,
        points_on_time=points_on_time,
        points_late=points_late,
        is_special=question.is_special,
        special_start_at=special_start_at,
        special_window_minutes=special_window_minutes,
    )
    opens, closes = _validate_daily_window(schedule_time, deadline_time)

    question.text = text.strip()
    question.choices = [str(choice) for choice in choices]
    question.answer = answer
    question.points_on_time = points_on_time
    question.points_late = points_late
    question.schedule_time = opens
    question.deadline_time = closes
    if question.is_special:
        question.special_start_at = special_start_at
    question.special_window_minutes = special_window_minutes
    await session.flush()
    logger.info("question_updated", question_id=question_id, day_index=question.day_index)
    return question


async def delete_question(session: AsyncSession, *, question_id: int) -> None:
    deleted = await QuestionsRepo.delete(session, question_id=question_id)
    if deleted == 0:
        raise QuestionNotFoundError


class CampaignService:
    list_campaigns = staticmethod(list_campaigns)
    create_campaign = staticmethod(create_campaign)
    update_campaign = staticmethod(update_campaign)
    update_campaign_status = staticmethod(update_campaign_status)
    list_questions = staticmethod(list_questions)
    update_question = staticmethod(update_question)
    delete_campaign = staticmethod(delete_campaign)
    enroll_players = staticmethod(enroll_players)
    add_question = staticmethod(add_question)
    delete_question = staticmethod(delete_question)

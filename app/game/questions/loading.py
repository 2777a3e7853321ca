from __future__ import annotations

from app.db.models.campaigns import Campaign
from app.db.models.questions import Question
from app.game.questions.types import CampaignClock, CampaignQuestion


def as_campaign_question(question: Question) -> CampaignQuestion:
    return CampaignQuestion(
        question_id=int(question.id),
        campaign_id=int(question.campaign_id),
        text=question.text,
        choices=tuple(str(choice) for choice in question.choices),
        correct_option=int(question.answer),
        points_on_time=int(question.points_on_time),
        points_late=int(question.points_late),
        day_index=question.day_index,
        schedule_time=question.schedule_time,
        deadline_time=question.deadline_time,
        is_special=bool(question.is_special),
        special_start_at=question.special_start_at,
        special_window_minutes=int(question.special_window_minutes),
    )


def as_campaign_clock(campaign: Campaign) -> CampaignClock:
    return CampaignClock(start_date=campaign.start_date, timezone=campaign.timezone)

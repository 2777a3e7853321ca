from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from app.db.session import SessionLocal
from app.economy.adjustments.service import AdjustmentService
from app.economy.store.catalog import StoreCatalog
from app.game.campaigns.service import CampaignService
from app.game.players.service import PlayerService

UTC = timezone.utc
CAMPAIGN_START = date(2026, 3, 2)


def local_time(day_index: int, hour: int, minute: int = 0) -> datetime:
    """Sao Paulo wall clock (UTC-3) on the given campaign day, as UTC."""
    day = CAMPAIGN_START + timedelta(days=day_index)
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=UTC) + timedelta(hours=3)


async def _create_player(name: str, *, coins: int = 0) -> int:
    async with SessionLocal.begin() as session:
        player = await PlayerService.create_player(session, name=name)
        player_id = int(player.id)
        if coins:
            await AdjustmentService.award_points(
                session,
                player_id=player_id,
                points=coins,
                reason="integration seed",
                actor="integration-test",
                idempotency_key=f"seed-{player_id}",
                now_utc=local_time(0, 7),
            )
    return player_id


async def _create_campaign(*, name: str = "Spring Quiz", days: int = 30) -> int:
    async with SessionLocal.begin() as session:
        campaign = await CampaignService.create_campaign(
            session,
            name=name,
            start_date=CAMPAIGN_START,
            end_date=CAMPAIGN_START + timedelta(days=days),
            timezone="America/Sao_Paulo",
        )
        return int(campaign.id)


async def _add_regular_question(
    campaign_id: int,
    *,
    text: str = "Pick the second option",
    answer: int = 1,
    points_on_time: int = 1000,
    points_late: int = 500,
) -> int:
    async with SessionLocal.begin() as session:
        question = await CampaignService.add_question(
            session,
            campaign_id=campaign_id,
            text=text,
            choices=["first", "second", "third"],
            answer=answer,
            points_on_time=points_on_time,
            points_late=points_late,
        )
        return int(question.id)


async def _add_special_question(campaign_id: int, *, start_at: datetime) -> int:
    async with SessionLocal.begin() as session:
        question = await CampaignService.add_question(
            session,
            campaign_id=campaign_id,
            text="Flash round",
            choices=["yes", "no"],
            answer=0,
            points_on_time=2000,
            points_late=800,
            is_special=True,
            special_start_at=start_at,
        )
        return int(question.id)


async def _create_product(
    campaign_id: int,
    *,
    price: int = 80,
    quantity: int = 1,
    available_from: datetime | None = None,
    available_until: datetime | None = None,
) -> int:
    async with SessionLocal.begin() as session:
        product = await StoreCatalog.create_product(
            session,
            campaign_id=campaign_id,
            name="Team mug",
            price_in_game_coins=price,
            quantity=quantity,
            available_from=available_from,
            available_until=available_until,
        )
        return int(product.id)

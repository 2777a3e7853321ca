from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.campaign_players import CampaignPlayer
from app.db.models.campaigns import Campaign


class CampaignsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, campaign_id: int) -> Campaign | None:
        return await session.get(Campaign, campaign_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, campaign_id: int) -> Campaign | None:
        stmt = select(Campaign).where(Campaign.id == campaign_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_all(session: AsyncSession, *, status: str | None = None) -> list[Campaign]:
        stmt = select(Campaign).order_by(Campaign.start_date.desc(), Campaign.id.desc())
        if status is not None:
            stmt = stmt.where(Campaign.status == status)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        name: str,
        start_date: date,
        end_date: date,
        timezone: str,
        status: str = "PLANNED",
    ) -> Campaign:
        campaign = Campaign(
            name=name,
            status=status,
            start_date=start_date,
            end_date=end_date,
            timezone=timezone,
            next_day_index=0,
        )
        session.add(campaign)
        await session.flush()
        return campaign

    @staticmethod
    async def delete(session: AsyncSession, *, campaign_id: int) -> int:
        stmt = delete(Campaign).where(Campaign.id == campaign_id)
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def enroll_players(
        session: AsyncSession,
        *,
        campaign_id: int,
        player_ids: Sequence[int],
    ) -> int:
        ids = sorted({int(player_id) for player_id in player_ids})
        if not ids:
            return 0
        stmt = (
            insert(CampaignPlayer)
            .values([{"campaign_id": campaign_id, "player_id": player_id} for player_id in ids])
            .on_conflict_do_nothing(
                index_elements=[CampaignPlayer.campaign_id, CampaignPlayer.player_id]
            )
            .returning(CampaignPlayer.player_id)
        )
        result = await session.execute(stmt)
        return len(list(result.scalars().all()))

    @staticmethod
    async def list_player_ids(session: AsyncSession, *, campaign_id: int) -> list[int]:
        stmt = (
            select(CampaignPlayer.player_id)
            .where(CampaignPlayer.campaign_id == campaign_id)
            .order_by(CampaignPlayer.player_id.asc())
        )
        result = await session.execute(stmt)
        return [int(player_id) for player_id in result.scalars().all()]

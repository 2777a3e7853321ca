from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.campaign_scores import CampaignScore
from app.db.models.players import Player


class CampaignScoresRepo:
    @staticmethod
    async def add_points(
        session: AsyncSession,
        *,
        player_id: int,
        campaign_id: int,
        points: int,
        now_utc: datetime,
    ) -> int:
        stmt = insert(CampaignScore).values(
            player_id=player_id,
            campaign_id=campaign_id,
            points=points,
            updated_at=now_utc,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[CampaignScore.player_id, CampaignScore.campaign_id],
            set_={
                "points": CampaignScore.points + stmt.excluded.points,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(CampaignScore.points)
        result = await session.execute(stmt)
        return int(result.scalar_one())

    @staticmethod
    async def get_for_player(session: AsyncSession, *, player_id: int) -> dict[int, int]:
        stmt = select(CampaignScore.campaign_id, CampaignScore.points).where(
            CampaignScore.player_id == player_id
        )
        result = await session.execute(stmt)
        return {int(campaign_id): int(points) for campaign_id, points in result.all()}

    @staticmethod
    async def list_top_for_campaign(
        session: AsyncSession,
        *,
        campaign_id: int,
        limit: int,
    ) -> list[tuple[Player, int]]:
        stmt = (
            select(Player, CampaignScore.points)
            .join(CampaignScore, CampaignScore.player_id == Player.id)
            .where(CampaignScore.campaign_id == campaign_id)
            .order_by(CampaignScore.points.desc(), Player.id.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [(player, int(points)) for player, points in result.all()]

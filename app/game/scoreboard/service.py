from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repo.campaign_scores_repo import CampaignScoresRepo
from app.db.repo.campaigns_repo import CampaignsRepo
from app.db.repo.players_repo import PlayersRepo
from app.db.repo.teams_repo import TeamsRepo
from app.game.errors import CampaignNotFoundError
from app.game.scoreboard.types import ScoreboardRow


async def top_players(session: AsyncSession, *, limit: int = 20) -> list[ScoreboardRow]:
    players = await PlayersRepo.list_top_by_score(session, limit=limit)
    return [
        ScoreboardRow(
            rank=rank,
            entity_id=int(player.id),
            name=player.name,
            points=int(player.score),
            game_coins=int(player.game_coins),
        )
        for rank, player in enumerate(players, start=1)
    ]


async def top_players_for_campaign(
    session: AsyncSession,
    *,
    campaign_id: int,
    limit: int = 20,
) -> list[ScoreboardRow]:
    if await CampaignsRepo.get_by_id(session, campaign_id) is None:
        raise CampaignNotFoundError
    rows = await CampaignScoresRepo.list_top_for_campaign(
        session,
        campaign_id=campaign_id,
        limit=limit,
    )
    return [
        ScoreboardRow(rank=rank, entity_id=int(player.id), name=player.name, points=points)
        for rank, (player, points) in enumerate(rows, start=1)
    ]


async def top_teams(session: AsyncSession, *, limit: int = 20) -> list[ScoreboardRow]:
    rows = await TeamsRepo.list_score_totals(session, limit=limit)
    return [
        ScoreboardRow(
            rank=rank,
            entity_id=int(team.id),
            name=team.name,
            points=total,
            members=members,
        )
        for rank, (team, total, members) in enumerate(rows, start=1)
    ]


class ScoreboardService:
    top_players = staticmethod(top_players)
    top_players_for_campaign = staticmethod(top_players_for_campaign)
    top_teams = staticmethod(top_teams)

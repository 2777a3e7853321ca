from app.db.models.answers import Answer
from app.db.models.campaign_players import CampaignPlayer
from app.db.models.campaign_scores import CampaignScore
from app.db.models.campaigns import Campaign
from app.db.models.ledger_entries import LedgerEntry
from app.db.models.players import Player
from app.db.models.products import Product
from app.db.models.purchases import Purchase
from app.db.models.questions import Question
from app.db.models.teams import Team

__all__ = [
    "Answer",
    "Campaign",
    "CampaignPlayer",
    "CampaignScore",
    "LedgerEntry",
    "Player",
    "Product",
    "Purchase",
    "Question",
    "Team",
]

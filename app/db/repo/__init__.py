from app.db.repo.answers_repo import AnswersRepo
from app.db.repo.campaign_scores_repo import CampaignScoresRepo
from app.db.repo.campaigns_repo import CampaignsRepo
from app.db.repo.ledger_repo import LedgerRepo
from app.db.repo.players_repo import PlayersRepo
from app.db.repo.products_repo import ProductsRepo
from app.db.repo.purchases_repo import PurchasesRepo
from app.db.repo.questions_repo import QuestionsRepo
from app.db.repo.teams_repo import TeamsRepo

__all__ = [
    "AnswersRepo",
    "CampaignScoresRepo",
    "CampaignsRepo",
    "LedgerRepo",
    "PlayersRepo",
    "ProductsRepo",
    "PurchasesRepo",
    "QuestionsRepo",
    "TeamsRepo",
]

from app.db.models.payouts_history import PayoutsHistory
from app.db.models.payouts_summary import PayoutsSummary
from app.db.models.trainer_banking import TrainerBanking

__all__ = ["PayoutsHistory", "PayoutsSummary", "TrainerBanking"]

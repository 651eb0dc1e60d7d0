from app.db.repositories.banking_repository import BankingRepository
from app.db.repositories.history_repository import HistoryRepository
from app.db.repositories.summary_repository import SummaryRepository

__all__ = [
    "BankingRepository",
    "HistoryRepository",
    "SummaryRepository",
]

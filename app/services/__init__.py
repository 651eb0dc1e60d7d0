from app.services.banking_service import BankingService
from app.services.order_credit import OrderCreditProcessor
from app.services.payout_ledger import LedgerAudit, PayoutLedger
from app.services.payout_summary import PayoutSummaryReader
from app.services.trainer_payouts import TrainerPayouts
from app.services.view_counter import ViewCounter

__all__ = [
    "BankingService",
    "LedgerAudit",
    "OrderCreditProcessor",
    "PayoutLedger",
    "PayoutSummaryReader",
    "TrainerPayouts",
    "ViewCounter",
]

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.formatting import format_amount_label, format_date_label, mask_iban
from app.db.models import PayoutsHistory
from app.db.repositories import BankingRepository, HistoryRepository
from app.schemas.payouts import HistoryItem, PayoutSummaryResponse
from app.services.payout_ledger import PayoutLedger


class PayoutSummaryReader:
    def __init__(self, session: AsyncSession) -> None:
        self.ledger = PayoutLedger(session)
        self.history_repo = HistoryRepository(session)
        self.banking_repo = BankingRepository(session)

    def _history_item(self, entry: PayoutsHistory) -> HistoryItem:
        return HistoryItem(
            id=entry.id,
            type=entry.type,
            status=entry.status,
            amount=entry.amount_cents,
            amount_label=format_amount_label(entry.amount_cents, entry.currency),
            currency=entry.currency,
            date=entry.date,
            date_label=format_date_label(entry.date),
            meta=entry.meta,
        )

    async def get_summary(
        self, trainer_id: str, limit: Optional[int] = None
    ) -> PayoutSummaryResponse:
        """Balances, masked banking and the latest history, newest first."""
        summary = await self.ledger.ensure_profile(trainer_id)
        banking = await self.banking_repo.get(trainer_id)
        history = await self.history_repo.list_recent(
            trainer_id, limit or settings.history_limit
        )
        earned, _, _ = await self.history_repo.get_replay_totals(trainer_id)

        return PayoutSummaryResponse(
            trainer_id=trainer_id,
            currency=summary.currency,
            available=summary.available_cents,
            pending=summary.pending_cents,
            earned=earned,
            min_payout=settings.min_payout_cents,
            has_banking=bool(banking and banking.has_banking),
            auto_payout=bool(banking and banking.auto_payout),
            payout_iban_masked=mask_iban(banking.payout_iban) if banking else None,
            history=[self._history_item(entry) for entry in history],
        )

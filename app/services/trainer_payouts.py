import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.models import PayoutsHistory
from app.db.repositories import BankingRepository, SummaryRepository
from app.exceptions import (
    BankingDetailsMissingException,
    BelowMinimumPayoutException,
    InsufficientBalanceException,
)
from app.services.payout_ledger import PayoutLedger

logger = logging.getLogger(__name__)


class TrainerPayouts:
    """Trainer-initiated withdrawals with the storefront's business rules."""

    def __init__(self, session: AsyncSession) -> None:
        self.ledger = PayoutLedger(session)
        self.banking_repo = BankingRepository(session)
        self.summary_repo = SummaryRepository(session)

    async def request_withdrawal(
        self, trainer_id: str, amount_cents: Optional[int] = None
    ) -> PayoutsHistory:
        """Must be called within transaction context (uses SELECT FOR UPDATE)."""
        banking = await self.banking_repo.get(trainer_id)
        if banking is None or not banking.has_banking:
            raise BankingDetailsMissingException(trainer_id)

        await self.ledger.ensure_profile(trainer_id)
        summary = await self.summary_repo.get_for_update(trainer_id)
        amount = summary.available_cents if amount_cents is None else amount_cents

        if amount <= 0:
            raise InsufficientBalanceException(trainer_id, summary.available_cents, amount)
        if amount < settings.min_payout_cents:
            logger.info(
                "Withdrawal below minimum trainer_id=%s amount_cents=%s min_cents=%s",
                trainer_id,
                amount,
                settings.min_payout_cents,
                extra={"trainer_id": trainer_id, "amount_cents": amount},
            )
            raise BelowMinimumPayoutException(
                trainer_id, amount, settings.min_payout_cents
            )

        return await self.ledger.request_withdrawal(
            trainer_id,
            amount,
            summary.currency,
            meta={"reason": "manual_request"},
        )

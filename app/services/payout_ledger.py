import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.enums import HistoryStatus, HistoryType
from app.core.money import require_positive_cents
from app.db.models import PayoutsHistory, PayoutsSummary
from app.db.repositories import HistoryRepository, SummaryRepository
from app.exceptions import (
    CurrencyMismatchException,
    InsufficientBalanceException,
    PayoutHistoryNotFoundException,
    SystemException,
    WithdrawalNotRequestedException,
)
from app.metrics import ledger_entries_total, withdrawals_total

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerAudit:
    trainer_id: str
    available_cents: int
    pending_cents: int
    replayed_available_cents: int
    replayed_pending_cents: int

    @property
    def consistent(self) -> bool:
        return (
            self.available_cents == self.replayed_available_cents
            and self.pending_cents == self.replayed_pending_cents
        )


class PayoutLedger:
    """Trainer balances and their append-only history.

    Every mutating method must be called within a transaction context
    (``async with session.begin()``). The trainer's summary row is locked
    with SELECT FOR UPDATE before it is read, so the balance check, the
    summary update and the history write commit or roll back together.
    """

    def __init__(
        self, session: AsyncSession, default_currency: Optional[str] = None
    ) -> None:
        self.session = session
        self.summary_repo = SummaryRepository(session)
        self.history_repo = HistoryRepository(session)
        self.default_currency = (default_currency or settings.default_currency).upper()

    async def ensure_profile(
        self, trainer_id: str, currency: Optional[str] = None
    ) -> PayoutsSummary:
        await self.summary_repo.ensure(
            trainer_id, (currency or self.default_currency).upper()
        )
        summary = await self.summary_repo.get(trainer_id)
        if summary is None:
            raise SystemException(
                message=f"Payout summary missing after upsert: {trainer_id}",
                details={"trainer_id": trainer_id},
            )
        return summary

    async def lock_profile(
        self, trainer_id: str, currency: Optional[str] = None
    ) -> PayoutsSummary:
        """Create if needed, then lock the trainer's summary row.

        Raises CurrencyMismatchException when the balance is kept in
        another currency.
        """
        currency = (currency or self.default_currency).upper()
        await self.summary_repo.ensure(trainer_id, currency)
        summary = await self.summary_repo.get_for_update(trainer_id)
        if summary.currency != currency:
            raise CurrencyMismatchException(trainer_id, summary.currency, currency)
        return summary

    async def credit_sale(
        self,
        trainer_id: str,
        amount_cents: int,
        currency: Optional[str] = None,
        meta: Optional[dict] = None,
        source_ref: Optional[str] = None,
    ) -> PayoutsHistory:
        """Credit a sale to the trainer's available balance.

        Does not deduplicate: callers that may redeliver check
        ``HistoryRepository.exists_for_source_ref`` first.
        """
        amount_cents = require_positive_cents(amount_cents)
        currency = (currency or self.default_currency).upper()

        summary = await self.lock_profile(trainer_id, currency)
        await self.summary_repo.apply_delta(summary, available_delta=amount_cents)
        entry = await self.history_repo.create_entry(
            trainer_id=trainer_id,
            entry_type=HistoryType.SALE,
            status=HistoryStatus.AVAILABLE,
            amount_cents=amount_cents,
            currency=currency,
            meta=meta,
            source_ref=source_ref,
        )

        ledger_entries_total.labels(entry_type=HistoryType.SALE.value).inc()
        logger.info(
            "Sale credited trainer_id=%s amount_cents=%s available_cents=%s history_id=%s",
            trainer_id,
            amount_cents,
            summary.available_cents,
            entry.id,
            extra={
                "trainer_id": trainer_id,
                "amount_cents": amount_cents,
                "history_id": entry.id,
                "source_ref": source_ref,
            },
        )
        return entry

    async def request_withdrawal(
        self,
        trainer_id: str,
        amount_cents: int,
        currency: Optional[str] = None,
        meta: Optional[dict] = None,
    ) -> PayoutsHistory:
        """Move funds from available to pending."""
        amount_cents = require_positive_cents(amount_cents)
        currency = (currency or self.default_currency).upper()

        summary = await self.lock_profile(trainer_id, currency)
        if amount_cents > summary.available_cents:
            logger.warning(
                "Insufficient balance for withdrawal trainer_id=%s available_cents=%s requested_cents=%s",
                trainer_id,
                summary.available_cents,
                amount_cents,
                extra={
                    "trainer_id": trainer_id,
                    "available_cents": summary.available_cents,
                    "requested_cents": amount_cents,
                },
            )
            raise InsufficientBalanceException(
                trainer_id, summary.available_cents, amount_cents
            )

        await self.summary_repo.apply_delta(
            summary, available_delta=-amount_cents, pending_delta=amount_cents
        )
        entry = await self.history_repo.create_entry(
            trainer_id=trainer_id,
            entry_type=HistoryType.WITHDRAW,
            status=HistoryStatus.REQUESTED,
            amount_cents=amount_cents,
            currency=currency,
            meta=meta,
        )

        ledger_entries_total.labels(entry_type=HistoryType.WITHDRAW.value).inc()
        withdrawals_total.labels(status=HistoryStatus.REQUESTED.value).inc()
        logger.info(
            "Withdrawal requested trainer_id=%s amount_cents=%s history_id=%s",
            trainer_id,
            amount_cents,
            entry.id,
            extra={
                "trainer_id": trainer_id,
                "amount_cents": amount_cents,
                "history_id": entry.id,
            },
        )
        return entry

    async def settle_withdrawal(self, history_id: int) -> PayoutsHistory:
        """Mark a requested withdrawal as paid and release it from pending."""
        entry = await self.history_repo.get_by_id(history_id)
        if entry is None:
            raise PayoutHistoryNotFoundException(history_id)

        # Summary row first, then the entry: same lock order as credit/withdraw.
        summary = await self.summary_repo.get_for_update(entry.trainer_id)
        entry = await self.history_repo.get_by_id_for_update(history_id)
        if entry is None:
            raise PayoutHistoryNotFoundException(history_id)

        if entry.type != HistoryType.WITHDRAW or entry.status != HistoryStatus.REQUESTED:
            logger.warning(
                "Settlement rejected history_id=%s type=%s status=%s",
                history_id,
                entry.type,
                entry.status,
                extra={"history_id": history_id, "trainer_id": entry.trainer_id},
            )
            raise WithdrawalNotRequestedException(
                history_id, entry.type, entry.status
            )

        await self.summary_repo.apply_delta(summary, pending_delta=-entry.amount_cents)
        await self.history_repo.mark_paid(entry)

        withdrawals_total.labels(status=HistoryStatus.PAID.value).inc()
        logger.info(
            "Withdrawal settled history_id=%s trainer_id=%s amount_cents=%s",
            history_id,
            entry.trainer_id,
            entry.amount_cents,
            extra={
                "history_id": history_id,
                "trainer_id": entry.trainer_id,
                "amount_cents": entry.amount_cents,
            },
        )
        return entry

    async def replay_balances(self, trainer_id: str) -> tuple[int, int]:
        """Recompute (available, pending) from history alone."""
        sales, requested, paid = await self.history_repo.get_replay_totals(trainer_id)
        return sales - requested - paid, requested

    async def audit(self, trainer_id: str) -> Optional[LedgerAudit]:
        summary = await self.summary_repo.get(trainer_id)
        if summary is None:
            return None
        available, pending = await self.replay_balances(trainer_id)
        audit = LedgerAudit(
            trainer_id=trainer_id,
            available_cents=summary.available_cents,
            pending_cents=summary.pending_cents,
            replayed_available_cents=available,
            replayed_pending_cents=pending,
        )
        if not audit.consistent:
            logger.error(
                "Ledger summary diverges from history trainer_id=%s",
                trainer_id,
                extra={"trainer_id": trainer_id, "audit": audit},
            )
        return audit

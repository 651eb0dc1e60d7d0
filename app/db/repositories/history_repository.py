from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import HistoryStatus, HistoryType
from app.db.models import PayoutsHistory


class HistoryRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_entry(
        self,
        trainer_id: str,
        entry_type: HistoryType,
        status: HistoryStatus,
        amount_cents: int,
        currency: str,
        meta: Optional[dict] = None,
        source_ref: Optional[str] = None,
    ) -> PayoutsHistory:
        entry = PayoutsHistory(
            trainer_id=trainer_id,
            type=entry_type.value,
            status=status.value,
            amount_cents=amount_cents,
            currency=currency,
            date=datetime.now(timezone.utc),
            meta=meta,
            source_ref=source_ref,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def get_by_id(self, history_id: int) -> Optional[PayoutsHistory]:
        stmt = select(PayoutsHistory).where(PayoutsHistory.id == history_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id_for_update(self, history_id: int) -> Optional[PayoutsHistory]:
        stmt = (
            select(PayoutsHistory)
            .where(PayoutsHistory.id == history_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def mark_paid(self, entry: PayoutsHistory) -> PayoutsHistory:
        entry.type = HistoryType.PAID.value
        entry.status = HistoryStatus.PAID.value
        entry.date = datetime.now(timezone.utc)
        await self.session.flush()
        return entry

    async def list_recent(self, trainer_id: str, limit: int) -> list[PayoutsHistory]:
        stmt = (
            select(PayoutsHistory)
            .where(PayoutsHistory.trainer_id == trainer_id)
            .order_by(PayoutsHistory.date.desc(), PayoutsHistory.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def exists_for_source_ref(self, source_ref: str) -> bool:
        stmt = (
            select(PayoutsHistory.id)
            .where(PayoutsHistory.source_ref == source_ref)
            .where(PayoutsHistory.type == HistoryType.SALE.value)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_replay_totals(self, trainer_id: str) -> tuple[int, int, int]:
        """
        Sum history by lifecycle bucket in a single query.

        Returns: (sales_cents, requested_cents, paid_cents)
        """

        def _bucket(entry_type: HistoryType):
            return func.coalesce(
                func.sum(
                    case(
                        (
                            PayoutsHistory.type == entry_type.value,
                            PayoutsHistory.amount_cents,
                        ),
                        else_=0,
                    )
                ),
                0,
            )

        stmt = select(
            _bucket(HistoryType.SALE).label("sales"),
            _bucket(HistoryType.WITHDRAW).label("requested"),
            _bucket(HistoryType.PAID).label("paid"),
        ).where(PayoutsHistory.trainer_id == trainer_id)

        result = await self.session.execute(stmt)
        row = result.one()
        return int(row.sales), int(row.requested), int(row.paid)

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.dialect import insert_ignore_conflict
from app.db.models import PayoutsSummary


class SummaryRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def ensure(self, trainer_id: str, currency: str) -> None:
        await insert_ignore_conflict(
            self.session,
            PayoutsSummary,
            {
                "trainer_id": trainer_id,
                "available_cents": 0,
                "pending_cents": 0,
                "currency": currency,
            },
            index_elements=["trainer_id"],
        )

    async def get(self, trainer_id: str) -> Optional[PayoutsSummary]:
        stmt = select(PayoutsSummary).where(PayoutsSummary.trainer_id == trainer_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_update(self, trainer_id: str) -> PayoutsSummary:
        """Lock the trainer's summary row until the surrounding transaction ends."""
        stmt = (
            select(PayoutsSummary)
            .where(PayoutsSummary.trainer_id == trainer_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def apply_delta(
        self,
        summary: PayoutsSummary,
        available_delta: int = 0,
        pending_delta: int = 0,
    ) -> PayoutsSummary:
        summary.available_cents += available_delta
        summary.pending_cents += pending_delta
        await self.session.flush()
        return summary

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.dialect import insert_ignore_conflict
from app.db.models import TrainerBanking

logger = logging.getLogger(__name__)


class BankingRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, trainer_id: str) -> Optional[TrainerBanking]:
        stmt = select(TrainerBanking).where(TrainerBanking.trainer_id == trainer_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create_for_update(
        self, trainer_id: str, email: Optional[str] = None
    ) -> TrainerBanking:
        await insert_ignore_conflict(
            self.session,
            TrainerBanking,
            {"trainer_id": trainer_id, "email": email, "auto_payout": False},
            index_elements=["trainer_id"],
        )
        stmt = (
            select(TrainerBanking)
            .where(TrainerBanking.trainer_id == trainer_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def update(self, banking: TrainerBanking, **fields) -> TrainerBanking:
        for name, value in fields.items():
            setattr(banking, name, value)
        await self.session.flush()
        logger.info(
            "Banking profile updated trainer_id=%s fields=%s",
            banking.trainer_id,
            sorted(fields),
            extra={"trainer_id": banking.trainer_id},
        )
        return banking

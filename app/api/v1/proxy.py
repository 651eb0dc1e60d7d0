import logging

from fastapi import APIRouter, Depends, status

from app.api.dependencies import ProxyTrainerDep, SessionDep, verify_signed_proxy
from app.schemas.banking import BankingResponse, BankingUpdate
from app.schemas.payouts import (
    HistoryEntryResponse,
    PayoutSummaryResponse,
    WithdrawalRequest,
)
from app.services.banking_service import BankingService
from app.services.payout_summary import PayoutSummaryReader
from app.services.trainer_payouts import TrainerPayouts

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(verify_signed_proxy)])


@router.get("/payouts/summary", response_model=PayoutSummaryResponse)
async def get_payout_summary(
    trainer: ProxyTrainerDep, session: SessionDep
) -> PayoutSummaryResponse:
    async with session.begin():
        reader = PayoutSummaryReader(session)
        return await reader.get_summary(trainer.trainer_id)


@router.post(
    "/payouts/request",
    response_model=HistoryEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_payout(
    trainer: ProxyTrainerDep,
    session: SessionDep,
    payload: WithdrawalRequest | None = None,
) -> HistoryEntryResponse:
    amount_cents = payload.amount_cents if payload else None
    async with session.begin():
        service = TrainerPayouts(session)
        entry = await service.request_withdrawal(trainer.trainer_id, amount_cents)
        return HistoryEntryResponse.from_entry(entry)


@router.get("/trainer/banking", response_model=BankingResponse)
async def get_banking(trainer: ProxyTrainerDep, session: SessionDep) -> BankingResponse:
    service = BankingService(session)
    return await service.get_profile(trainer.trainer_id)


@router.post("/trainer/banking", response_model=BankingResponse)
async def update_banking(
    payload: BankingUpdate, trainer: ProxyTrainerDep, session: SessionDep
) -> BankingResponse:
    async with session.begin():
        service = BankingService(session)
        return await service.update_profile(trainer.trainer_id, trainer.email, payload)

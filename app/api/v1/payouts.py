from fastapi import APIRouter

from app.api.dependencies import AdminDep, SessionDep
from app.exceptions import NotFoundException
from app.schemas.payouts import HistoryEntryResponse, LedgerAuditResponse
from app.services.payout_ledger import PayoutLedger

router = APIRouter()


@router.post("/{history_id}/settle", response_model=HistoryEntryResponse)
async def settle_payout(
    history_id: int, admin: AdminDep, session: SessionDep
) -> HistoryEntryResponse:
    async with session.begin():
        ledger = PayoutLedger(session)
        entry = await ledger.settle_withdrawal(history_id)
        result = HistoryEntryResponse.from_entry(entry)
        result.meta["settled_by"] = admin
        return result


@router.get("/trainers/{trainer_id}/audit", response_model=LedgerAuditResponse)
async def audit_trainer(
    trainer_id: str, admin: AdminDep, session: SessionDep
) -> LedgerAuditResponse:
    ledger = PayoutLedger(session)
    audit = await ledger.audit(trainer_id)

    if audit is None:
        raise NotFoundException(
            message=f"No payout summary for trainer: {trainer_id}",
            details={"trainer_id": trainer_id},
        )

    return LedgerAuditResponse(
        trainer_id=audit.trainer_id,
        available_cents=audit.available_cents,
        pending_cents=audit.pending_cents,
        replayed_available_cents=audit.replayed_available_cents,
        replayed_pending_cents=audit.replayed_pending_cents,
        consistent=audit.consistent,
    )

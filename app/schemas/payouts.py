from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.core.enums import HistoryStatus, HistoryType
from app.db.models import PayoutsHistory
from app.schemas.common import BaseResponse


class HistoryItem(BaseModel):
    id: int
    type: HistoryType
    status: HistoryStatus
    amount: int
    amount_label: str
    currency: str
    date: datetime
    date_label: str
    meta: Optional[dict] = None


class PayoutSummaryResponse(BaseResponse):
    trainer_id: str
    currency: str
    available: int
    pending: int
    earned: int
    min_payout: int
    has_banking: bool
    auto_payout: bool
    payout_iban_masked: Optional[str] = None
    history: list[HistoryItem] = Field(default_factory=list)


class WithdrawalRequest(BaseModel):
    # Omitted: withdraw the whole available balance.
    amount_cents: Optional[int] = Field(default=None, gt=0)


class HistoryEntryResponse(BaseResponse):
    id: int
    trainer_id: str
    type: HistoryType
    status: HistoryStatus
    amount_cents: int
    currency: str
    date: datetime
    provenance: Optional[dict] = None

    @classmethod
    def from_entry(cls, entry: PayoutsHistory) -> "HistoryEntryResponse":
        return cls(
            id=entry.id,
            trainer_id=entry.trainer_id,
            type=entry.type,
            status=entry.status,
            amount_cents=entry.amount_cents,
            currency=entry.currency,
            date=entry.date,
            provenance=entry.meta,
        )


class LedgerAuditResponse(BaseResponse):
    trainer_id: str
    available_cents: int
    pending_cents: int
    replayed_available_cents: int
    replayed_pending_cents: int
    consistent: bool

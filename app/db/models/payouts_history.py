from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.core.enums import HistoryStatus, HistoryType
from app.db.base import BigIntPK, Base, JSONType


class PayoutsHistory(Base):
    """Append-only payout entry. Only withdraw/requested -> paid/paid may mutate."""

    __tablename__ = "payouts_history"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    trainer_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("payouts_summary.trainer_id", ondelete="RESTRICT"),
        nullable=False,
    )
    type: Mapped[HistoryType] = mapped_column(String(20), nullable=False)
    status: Mapped[HistoryStatus] = mapped_column(String(20), nullable=False)
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    currency: Mapped[str] = mapped_column(
        String(3), server_default="EUR", nullable=False
    )
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    source_ref: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    meta: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    __table_args__ = (
        CheckConstraint("amount_cents > 0", name="positive_history_amount"),
        CheckConstraint(
            "type IN ('sale', 'withdraw', 'paid')", name="valid_history_type"
        ),
        CheckConstraint(
            "status IN ('available', 'requested', 'paid')",
            name="valid_history_status",
        ),
        CheckConstraint(
            "(type = 'sale' AND status = 'available') "
            "OR (type = 'withdraw' AND status = 'requested') "
            "OR (type = 'paid' AND status = 'paid')",
            name="history_type_status_consistency",
        ),
        Index("idx_payouts_history_trainer_date", "trainer_id", "date"),
        Index("idx_payouts_history_source_ref", "source_ref"),
    )

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class PayoutsSummary(Base):
    """Running balances per trainer. Always equal to the replay of payouts_history."""

    __tablename__ = "payouts_summary"

    trainer_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    available_cents: Mapped[int] = mapped_column(
        BigInteger, default=0, server_default="0", nullable=False
    )
    pending_cents: Mapped[int] = mapped_column(
        BigInteger, default=0, server_default="0", nullable=False
    )
    currency: Mapped[str] = mapped_column(
        String(3), server_default="EUR", nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("available_cents >= 0", name="non_negative_available"),
        CheckConstraint("pending_cents >= 0", name="non_negative_pending"),
    )

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class TrainerBanking(Base):
    """Trainer payout destination. One row per trainer, never deleted."""

    __tablename__ = "trainer_banking"

    trainer_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    payout_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    payout_country: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    payout_iban: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    payout_bic: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    auto_payout: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false", nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    @property
    def has_banking(self) -> bool:
        return bool(self.payout_name and self.payout_country and self.payout_iban)

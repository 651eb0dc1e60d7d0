from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import BaseResponse


class BankingUpdate(BaseModel):
    payout_name: Optional[str] = Field(default=None, max_length=255)
    payout_country: Optional[str] = Field(default=None, min_length=2, max_length=2)
    payout_iban: Optional[str] = Field(default=None, max_length=64)
    payout_bic: Optional[str] = Field(default=None, max_length=16)
    auto_payout: Optional[bool] = None
    partial: bool = False


class BankingDetails(BaseModel):
    payout_name: Optional[str] = None
    payout_country: Optional[str] = None
    payout_iban_masked: Optional[str] = None
    payout_bic: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class BankingResponse(BaseResponse):
    trainer_id: str
    auto_payout: bool = False
    has_banking: bool = False
    banking: Optional[BankingDetails] = None

from app.schemas.banking import BankingDetails, BankingResponse, BankingUpdate
from app.schemas.common import BaseResponse, ErrorDetail, ErrorResponse
from app.schemas.payouts import (
    HistoryEntryResponse,
    HistoryItem,
    LedgerAuditResponse,
    PayoutSummaryResponse,
    WithdrawalRequest,
)
from app.schemas.profile import ProfileViewRequest, ProfileViewsResponse
from app.schemas.webhooks import OrderCreditResponse, ShopifyLineItem, ShopifyOrder

__all__ = [
    "BankingDetails",
    "BankingResponse",
    "BankingUpdate",
    "BaseResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HistoryEntryResponse",
    "HistoryItem",
    "LedgerAuditResponse",
    "PayoutSummaryResponse",
    "WithdrawalRequest",
    "ProfileViewRequest",
    "ProfileViewsResponse",
    "OrderCreditResponse",
    "ShopifyLineItem",
    "ShopifyOrder",
]

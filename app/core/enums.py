from enum import Enum


class HistoryType(str, Enum):
    SALE = "sale"
    WITHDRAW = "withdraw"
    PAID = "paid"


class HistoryStatus(str, Enum):
    AVAILABLE = "available"
    REQUESTED = "requested"
    PAID = "paid"


class VerificationFailure(str, Enum):
    MISSING_SECRET = "missing_secret"
    MISSING_SIGNATURE = "missing_signature"
    INVALID_SIGNATURE = "invalid_signature"

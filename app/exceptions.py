from typing import Any, Optional


class BaseAPIException(Exception):
    """
    Base exception for all API errors.

    Provides consistent structure with status_code, error_code, and details.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}


class ValidationException(BaseAPIException):
    """Invalid input data (HTTP 422)."""

    status_code = 422
    error_code = "VALIDATION_ERROR"


class BusinessException(BaseAPIException):
    """Business rule violation (HTTP 409)."""

    status_code = 409
    error_code = "BUSINESS_RULE_VIOLATION"


class NotFoundException(BaseAPIException):
    """Resource not found (HTTP 404)."""

    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"


class UnauthorizedException(BaseAPIException):
    """Request could not be authenticated (HTTP 401)."""

    status_code = 401
    error_code = "UNAUTHORIZED"


class ForbiddenException(BaseAPIException):
    """Authenticated caller is not allowed to act (HTTP 403)."""

    status_code = 403
    error_code = "FORBIDDEN"


class SystemException(BaseAPIException):
    """Internal system error (HTTP 500)."""

    status_code = 500
    error_code = "SYSTEM_ERROR"


# Boundary exceptions
class ConfigurationException(SystemException):
    """Required server configuration is missing."""

    error_code = "CONFIGURATION_ERROR"

    def __init__(self, setting: str, error_code: Optional[str] = None):
        super().__init__(
            message=f"Server is missing required configuration: {setting}",
            error_code=error_code,
            details={"setting": setting},
        )


class SignatureException(UnauthorizedException):
    """Signed request failed verification. Never carries the digest."""

    error_code = "INVALID_SIGNATURE"

    def __init__(self, reason: str):
        super().__init__(
            message="Request signature verification failed",
            error_code=reason.upper(),
            details={"reason": reason},
        )


class IdentityMismatchException(ForbiddenException):
    """Caller-supplied identity disagrees with the proxy-asserted one."""

    error_code = "IDENTITY_MISMATCH"

    def __init__(self) -> None:
        super().__init__(
            message="Customer identity does not match the logged-in customer"
        )


class MissingTrainerIdentityException(ValidationException):
    """Neither a customer id nor an email identifies the trainer."""

    status_code = 400
    error_code = "MISSING_TRAINER_IDENTITY"

    def __init__(self) -> None:
        super().__init__(message="A customer id or email is required")


class AdminForbiddenException(ForbiddenException):
    error_code = "ADMIN_FORBIDDEN"

    def __init__(self) -> None:
        super().__init__(message="Admin privileges required")


# Domain-specific exceptions
class InvalidAmountException(ValidationException):
    """Amount is not a finite positive number of minor units."""

    error_code = "INVALID_AMOUNT"

    def __init__(self, amount: Any):
        super().__init__(
            message=f"Amount must be a positive integer of cents: {amount!r}",
            details={"amount": str(amount)},
        )


class InsufficientBalanceException(BusinessException):
    """Withdrawal amount exceeds available balance."""

    error_code = "PAYOUT_INSUFFICIENT_BALANCE"

    def __init__(self, trainer_id: str, available: int, required: int):
        super().__init__(
            message="Insufficient available balance for withdrawal",
            details={
                "trainer_id": trainer_id,
                "available_cents": available,
                "required_cents": required,
            },
        )


class BelowMinimumPayoutException(BusinessException):
    error_code = "PAYOUT_BELOW_MINIMUM"

    def __init__(self, trainer_id: str, amount: int, minimum: int):
        super().__init__(
            message="Withdrawal amount is below the minimum payout",
            details={
                "trainer_id": trainer_id,
                "amount_cents": amount,
                "min_payout_cents": minimum,
            },
        )


class BankingDetailsMissingException(BusinessException):
    """Payout name, country and IBAN must be set before withdrawing."""

    error_code = "BANKING_DETAILS_MISSING"

    def __init__(self, trainer_id: str):
        super().__init__(
            message="Banking details are required before requesting a withdrawal",
            details={"trainer_id": trainer_id},
        )


class MissingBankingFieldsException(ValidationException):
    error_code = "BANKING_MISSING_FIELDS"

    def __init__(self, fields: list[str]):
        super().__init__(
            message=f"Missing banking fields: {', '.join(fields)}",
            details={"fields": fields},
        )


class PayoutHistoryNotFoundException(NotFoundException):
    """Payout history entry ID not found in database."""

    error_code = "PAYOUT_HISTORY_NOT_FOUND"

    def __init__(self, history_id: int):
        super().__init__(
            message=f"Payout history entry not found: {history_id}",
            details={"history_id": history_id},
        )


class WithdrawalNotRequestedException(BusinessException):
    """Only withdraw/requested entries can be settled."""

    error_code = "PAYOUT_NOT_REQUESTED"

    def __init__(self, history_id: int, entry_type: str, status: str):
        super().__init__(
            message=f"Payout history entry {history_id} is not in requested state",
            details={
                "history_id": history_id,
                "type": entry_type,
                "status": status,
            },
        )


class StorageUnavailableException(SystemException):
    """Backing store connection or query failure."""

    status_code = 503
    error_code = "STORAGE_UNAVAILABLE"

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(
            message=message, details={"operation": operation} if operation else {}
        )


class CurrencyMismatchException(BusinessException):
    """Ledger entries must share the trainer's summary currency."""

    error_code = "PAYOUT_CURRENCY_MISMATCH"

    def __init__(self, trainer_id: str, expected: str, received: str):
        super().__init__(
            message=f"Trainer balance is kept in {expected}, received {received}",
            details={
                "trainer_id": trainer_id,
                "expected_currency": expected,
                "received_currency": received,
            },
        )

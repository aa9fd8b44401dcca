"""
Custom Exceptions for the Gym Billing Service

Base exception type and the error code / error kind vocabularies shared by
the service layer and the HTTP layer.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    STATE_CONFLICT = "STATE_CONFLICT"
    NOT_FOUND = "NOT_FOUND"

    # Validation errors
    INVALID_AMOUNT = "INVALID_AMOUNT"
    OVERPAYMENT_REJECTED = "OVERPAYMENT_REJECTED"
    INVALID_POSTING_DATE = "INVALID_POSTING_DATE"
    INVALID_PERIOD = "INVALID_PERIOD"
    TRAINER_ADDON_NOT_ALLOWED = "TRAINER_ADDON_NOT_ALLOWED"

    # State conflicts
    ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
    DEFAULT_ACCOUNT = "DEFAULT_ACCOUNT"
    INVOICE_CLOSED = "INVOICE_CLOSED"
    INVOICE_HAS_PAYMENTS = "INVOICE_HAS_PAYMENTS"
    INVOICE_ALREADY_EXISTS = "INVOICE_ALREADY_EXISTS"
    PACKAGE_INACTIVE = "PACKAGE_INACTIVE"
    SUBSCRIPTION_CLOSED = "SUBSCRIPTION_CLOSED"
    SLIP_ALREADY_EXISTS = "SLIP_ALREADY_EXISTS"
    ALREADY_PAID = "ALREADY_PAID"
    NOT_PAID = "NOT_PAID"
    ENTRY_ALREADY_REVERSED = "ENTRY_ALREADY_REVERSED"
    EXPENSE_CATEGORY_INACTIVE = "EXPENSE_CATEGORY_INACTIVE"
    EXPENSE_CATEGORY_IN_USE = "EXPENSE_CATEGORY_IN_USE"
    EXPENSE_CATEGORY_EXISTS = "EXPENSE_CATEGORY_EXISTS"

    # Not found
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    LEDGER_ENTRY_NOT_FOUND = "LEDGER_ENTRY_NOT_FOUND"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    PACKAGE_NOT_FOUND = "PACKAGE_NOT_FOUND"
    TRAINER_NOT_FOUND = "TRAINER_NOT_FOUND"
    SUBSCRIPTION_NOT_FOUND = "SUBSCRIPTION_NOT_FOUND"
    INVOICE_NOT_FOUND = "INVOICE_NOT_FOUND"
    TRANSACTION_NOT_FOUND = "TRANSACTION_NOT_FOUND"
    EXPENSE_NOT_FOUND = "EXPENSE_NOT_FOUND"
    EXPENSE_CATEGORY_NOT_FOUND = "EXPENSE_CATEGORY_NOT_FOUND"
    SALARY_SLIP_NOT_FOUND = "SALARY_SLIP_NOT_FOUND"
    SALARY_CONFIG_NOT_FOUND = "SALARY_CONFIG_NOT_FOUND"
    NO_SALARY_CONFIG = "NO_SALARY_CONFIG"


class ErrorKind(str, Enum):
    """
    Error families.

    VALIDATION and NOT_FOUND are safe to retry once the input is corrected.
    STATE_CONFLICT must not be retried without re-reading current state.
    """
    VALIDATION = "validation"
    STATE_CONFLICT = "state_conflict"
    NOT_FOUND = "not_found"
    PERMISSION = "permission"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"

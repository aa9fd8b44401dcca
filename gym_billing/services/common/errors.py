# gym_billing/services/common/errors.py
"""
Service-layer exceptions.

These exceptions are raised by service methods and are translated into
HTTP responses by the API layer. Every concrete error belongs to one
``ErrorKind`` which fixes its status code.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from gym_billing.core.exceptions import BaseAppException, ErrorCode, ErrorKind


def _jsonable(details: Optional[dict[str, Any]]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in (details or {}).items():
        out[key] = str(value) if isinstance(value, Decimal) else value
    return out


class ServiceError(BaseAppException):
    """Base exception for all service-layer errors."""

    kind: ErrorKind = ErrorKind.VALIDATION
    default_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_status: int = 500

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        error_code: Optional[ErrorCode] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code or self.default_code,
            details=_jsonable(details),
            status_code=self.default_status,
        )

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["error"]["kind"] = self.kind.value
        return payload


# ---------------------------------------------------------------------------
# Families
# ---------------------------------------------------------------------------


class ValidationError(ServiceError):
    """Raised when input is rejected before any storage interaction."""

    kind = ErrorKind.VALIDATION
    default_code = ErrorCode.VALIDATION_ERROR
    default_status = 422

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        if field is not None:
            details = {"field": field, **(details or {})}
        super().__init__(message, details)
        self.field = field


class NotFoundError(ServiceError):
    """Raised when a requested resource does not exist."""

    kind = ErrorKind.NOT_FOUND
    default_code = ErrorCode.NOT_FOUND
    default_status = 404
    resource_type: str = "Resource"

    def __init__(
        self,
        identifier: Any,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        message = f"{self.resource_type} with identifier '{identifier}' not found"
        super().__init__(message, {"identifier": identifier, **(details or {})})
        self.identifier = identifier


class ConflictError(ServiceError):
    """Raised when an operation conflicts with current state."""

    kind = ErrorKind.STATE_CONFLICT
    default_code = ErrorCode.STATE_CONFLICT
    default_status = 409


class PermissionDeniedError(ServiceError):
    """Raised when the caller lacks a required permission."""

    kind = ErrorKind.PERMISSION
    default_code = ErrorCode.PERMISSION_DENIED
    default_status = 403

    def __init__(self, permission: str) -> None:
        super().__init__(f"Missing permission '{permission}'", {"permission": permission})
        self.permission = permission


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class InvalidAmountError(ValidationError):
    default_code = ErrorCode.INVALID_AMOUNT


class OverpaymentRejectedError(ValidationError):
    default_code = ErrorCode.OVERPAYMENT_REJECTED

    def __init__(self, invoice_id: int, amount: Decimal, balance_due: Decimal) -> None:
        super().__init__(
            f"Payment of {amount} exceeds remaining balance {balance_due} on invoice {invoice_id}",
            field="amount",
            details={"invoice_id": invoice_id, "amount": amount, "balance_due": balance_due},
        )


class InvalidPostingDateError(ValidationError):
    default_code = ErrorCode.INVALID_POSTING_DATE


class InvalidPeriodError(ValidationError):
    default_code = ErrorCode.INVALID_PERIOD


class TrainerAddonNotAllowedError(ValidationError):
    default_code = ErrorCode.TRAINER_ADDON_NOT_ALLOWED

    def __init__(self, package_id: int) -> None:
        super().__init__(
            f"Package {package_id} does not allow a trainer add-on",
            field="trainer_id",
            details={"package_id": package_id},
        )


# ---------------------------------------------------------------------------
# State conflicts
# ---------------------------------------------------------------------------


class AccountInactiveError(ConflictError):
    default_code = ErrorCode.ACCOUNT_INACTIVE

    def __init__(self, account_id: int) -> None:
        super().__init__(f"Account {account_id} is inactive", {"account_id": account_id})


class DefaultAccountError(ConflictError):
    default_code = ErrorCode.DEFAULT_ACCOUNT


class InvoiceClosedError(ConflictError):
    default_code = ErrorCode.INVOICE_CLOSED

    def __init__(self, invoice_id: int, status: str) -> None:
        super().__init__(
            f"Invoice {invoice_id} is {status}",
            {"invoice_id": invoice_id, "status": status},
        )


class InvoiceHasPaymentsError(ConflictError):
    default_code = ErrorCode.INVOICE_HAS_PAYMENTS

    def __init__(self, invoice_id: int) -> None:
        super().__init__(
            f"Invoice {invoice_id} has recorded payments",
            {"invoice_id": invoice_id},
        )


class InvoiceAlreadyExistsError(ConflictError):
    default_code = ErrorCode.INVOICE_ALREADY_EXISTS

    def __init__(self, subscription_id: int, invoice_id: int) -> None:
        super().__init__(
            f"Subscription {subscription_id} is already invoiced by invoice {invoice_id}",
            {"subscription_id": subscription_id, "invoice_id": invoice_id},
        )


class PackageInactiveError(ConflictError):
    default_code = ErrorCode.PACKAGE_INACTIVE

    def __init__(self, package_id: int) -> None:
        super().__init__(f"Package {package_id} is inactive", {"package_id": package_id})


class SubscriptionClosedError(ConflictError):
    default_code = ErrorCode.SUBSCRIPTION_CLOSED

    def __init__(self, subscription_id: int, status: str) -> None:
        super().__init__(
            f"Subscription {subscription_id} is {status}",
            {"subscription_id": subscription_id, "status": status},
        )


class SlipAlreadyExistsError(ConflictError):
    default_code = ErrorCode.SLIP_ALREADY_EXISTS

    def __init__(self, trainer_id: int, month: int, year: int) -> None:
        super().__init__(
            f"Salary slip already exists for trainer {trainer_id} for {month:02d}/{year}",
            {"trainer_id": trainer_id, "month": month, "year": year},
        )


class AlreadyPaidError(ConflictError):
    default_code = ErrorCode.ALREADY_PAID

    def __init__(self, slip_id: int) -> None:
        super().__init__(f"Salary slip {slip_id} is already paid", {"slip_id": slip_id})


class NotPaidError(ConflictError):
    default_code = ErrorCode.NOT_PAID

    def __init__(self, slip_id: int) -> None:
        super().__init__(f"Salary slip {slip_id} is not paid", {"slip_id": slip_id})


class EntryAlreadyReversedError(ConflictError):
    default_code = ErrorCode.ENTRY_ALREADY_REVERSED

    def __init__(self, entry_id: int) -> None:
        super().__init__(f"Ledger entry {entry_id} is already reversed", {"entry_id": entry_id})


class ExpenseCategoryInactiveError(ConflictError):
    default_code = ErrorCode.EXPENSE_CATEGORY_INACTIVE

    def __init__(self, category_id: int) -> None:
        super().__init__(f"Expense category {category_id} is inactive", {"category_id": category_id})


class ExpenseCategoryInUseError(ConflictError):
    default_code = ErrorCode.EXPENSE_CATEGORY_IN_USE

    def __init__(self, category_id: int, expense_count: int) -> None:
        super().__init__(
            f"Expense category {category_id} is used by {expense_count} expense(s); deactivate it instead",
            {"category_id": category_id, "expense_count": expense_count},
        )


class ExpenseCategoryExistsError(ConflictError):
    default_code = ErrorCode.EXPENSE_CATEGORY_EXISTS

    def __init__(self, name: str, category_id: int) -> None:
        super().__init__(
            f"Expense category '{name}' already exists",
            {"name": name, "category_id": category_id},
        )


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------


class AccountNotFoundError(NotFoundError):
    default_code = ErrorCode.ACCOUNT_NOT_FOUND
    resource_type = "Account"


class LedgerEntryNotFoundError(NotFoundError):
    default_code = ErrorCode.LEDGER_ENTRY_NOT_FOUND
    resource_type = "Ledger entry"


class MemberNotFoundError(NotFoundError):
    default_code = ErrorCode.MEMBER_NOT_FOUND
    resource_type = "Member"


class PackageNotFoundError(NotFoundError):
    default_code = ErrorCode.PACKAGE_NOT_FOUND
    resource_type = "Package"


class TrainerNotFoundError(NotFoundError):
    default_code = ErrorCode.TRAINER_NOT_FOUND
    resource_type = "Trainer"


class SubscriptionNotFoundError(NotFoundError):
    default_code = ErrorCode.SUBSCRIPTION_NOT_FOUND
    resource_type = "Subscription"


class InvoiceNotFoundError(NotFoundError):
    default_code = ErrorCode.INVOICE_NOT_FOUND
    resource_type = "Invoice"


class TransactionNotFoundError(NotFoundError):
    default_code = ErrorCode.TRANSACTION_NOT_FOUND
    resource_type = "Transaction"


class ExpenseNotFoundError(NotFoundError):
    default_code = ErrorCode.EXPENSE_NOT_FOUND
    resource_type = "Expense"


class ExpenseCategoryNotFoundError(NotFoundError):
    default_code = ErrorCode.EXPENSE_CATEGORY_NOT_FOUND
    resource_type = "Expense category"


class SalarySlipNotFoundError(NotFoundError):
    default_code = ErrorCode.SALARY_SLIP_NOT_FOUND
    resource_type = "Salary slip"


class SalaryConfigNotFoundError(NotFoundError):
    default_code = ErrorCode.SALARY_CONFIG_NOT_FOUND
    resource_type = "Salary config"


class NoSalaryConfigError(NotFoundError):
    default_code = ErrorCode.NO_SALARY_CONFIG
    resource_type = "Salary config"

    def __init__(self, trainer_id: int, month: int, year: int) -> None:
        super().__init__(
            f"trainer {trainer_id} as of {month:02d}/{year}",
            {"trainer_id": trainer_id, "month": month, "year": year},
        )

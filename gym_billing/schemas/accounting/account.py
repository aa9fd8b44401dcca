# --- File: gym_billing/schemas/accounting/account.py ---
"""
Account and ledger schemas.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from gym_billing.models.base import AccountType, ReferenceType
from gym_billing.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
    MoneyAmount,
    NonNegativeMoney,
)

__all__ = [
    "AccountCreate",
    "AccountUpdate",
    "AccountResponse",
    "AdjustmentRequest",
    "LedgerEntryResponse",
    "ReversalRequest",
    "BalanceCheck",
    "AccountSummary",
    "MonthlyIncomeExpense",
    "IncomeExpenseSummary",
]


class AccountCreate(BaseCreateSchema):
    account_name: str = Field(..., min_length=1, max_length=120)
    account_type: AccountType
    opening_balance: NonNegativeMoney = Field(default=Decimal("0.00"))
    bank_name: Optional[str] = Field(default=None, max_length=120)
    is_default: bool = False


class AccountUpdate(BaseUpdateSchema):
    account_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    bank_name: Optional[str] = Field(default=None, max_length=120)


class AccountResponse(BaseResponseSchema):
    account_name: str
    account_type: AccountType
    bank_name: Optional[str] = None
    opening_balance: MoneyAmount
    current_balance: MoneyAmount
    is_default: bool
    is_active: bool


class AdjustmentRequest(BaseSchema):
    """Manual balance correction. Positive credits the account, negative debits it."""

    amount: MoneyAmount
    note: str = Field(..., min_length=1, max_length=500)
    transaction_date: Optional[date] = None


class ReversalRequest(BaseSchema):
    description: Optional[str] = Field(default=None, max_length=500)


class LedgerEntryResponse(BaseResponseSchema):
    account_id: int
    transaction_date: date
    reference_type: ReferenceType
    reference_id: Optional[int] = None
    reference_no: Optional[str] = None
    description: Optional[str] = None
    debit: MoneyAmount
    credit: MoneyAmount
    balance: MoneyAmount
    reverses_entry_id: Optional[int] = None


class BalanceCheck(BaseSchema):
    """Result of recomputing an account balance from its ledger."""

    account_id: int
    opening_balance: MoneyAmount
    total_credit: MoneyAmount
    total_debit: MoneyAmount
    cached_balance: MoneyAmount
    computed_balance: MoneyAmount
    entry_count: int
    running_balance_consistent: bool = Field(
        ...,
        description="Every entry's balance equals the previous balance plus credit minus debit",
    )
    matches: bool


class AccountSummary(BaseSchema):
    account_id: int
    account_name: str
    account_type: AccountType
    is_active: bool
    opening_balance: MoneyAmount = Field(..., description="Balance at the start of the range")
    total_credit: MoneyAmount
    total_debit: MoneyAmount
    closing_balance: MoneyAmount


class MonthlyIncomeExpense(BaseSchema):
    year: int
    month: int
    income: MoneyAmount
    expense: MoneyAmount
    net: MoneyAmount


class IncomeExpenseSummary(BaseSchema):
    start_date: date
    end_date: date
    total_income: MoneyAmount
    total_expense: MoneyAmount
    net: MoneyAmount
    months: List[MonthlyIncomeExpense] = Field(default_factory=list)

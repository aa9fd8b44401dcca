# --- File: gym_billing/schemas/accounting/expense.py ---
"""
Expense and expense category schemas.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import Field

from gym_billing.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
    MoneyAmount,
    PositiveMoney,
)

__all__ = [
    "ExpenseCategoryCreate",
    "ExpenseCategoryUpdate",
    "ExpenseCategoryResponse",
    "ExpenseCreate",
    "ExpenseUpdate",
    "ExpenseResponse",
    "ExpenseReportLine",
    "ExpenseReportItem",
]


class ExpenseCategoryCreate(BaseCreateSchema):
    name: str = Field(..., min_length=1, max_length=80)
    description: Optional[str] = None


class ExpenseCategoryUpdate(BaseUpdateSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=80)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class ExpenseCategoryResponse(BaseResponseSchema):
    name: str
    description: Optional[str] = None
    is_active: bool


class ExpenseCreate(BaseCreateSchema):
    account_id: int
    amount: PositiveMoney
    category_id: int
    expense_date: Optional[date] = None
    description: Optional[str] = Field(default=None, max_length=500)
    reference_number: Optional[str] = Field(default=None, max_length=64)


class ExpenseUpdate(BaseUpdateSchema):
    """Partial edit. Changing amount, date or account re-posts the ledger debit."""

    account_id: Optional[int] = None
    amount: Optional[PositiveMoney] = None
    category_id: Optional[int] = None
    expense_date: Optional[date] = None
    description: Optional[str] = Field(default=None, max_length=500)
    reference_number: Optional[str] = Field(default=None, max_length=64)


class ExpenseResponse(BaseResponseSchema):
    account_id: int
    category_id: int
    expense_date: date
    description: Optional[str] = None
    amount: MoneyAmount
    reference_number: Optional[str] = None
    ledger_entry_id: Optional[int] = None


class ExpenseReportLine(BaseSchema):
    expense_id: int
    expense_date: date
    description: Optional[str] = None
    amount: MoneyAmount
    account_name: str


class ExpenseReportItem(BaseSchema):
    """Spending under one category over the report range."""

    category_id: int
    category_name: str
    total_amount: MoneyAmount
    expense_count: int
    expenses: List[ExpenseReportLine] = Field(default_factory=list)

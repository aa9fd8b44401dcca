from gym_billing.schemas.accounting.account import (
    AccountCreate,
    AccountResponse,
    AccountSummary,
    AccountUpdate,
    AdjustmentRequest,
    BalanceCheck,
    IncomeExpenseSummary,
    LedgerEntryResponse,
    MonthlyIncomeExpense,
    ReversalRequest,
)
from gym_billing.schemas.accounting.expense import (
    ExpenseCategoryCreate,
    ExpenseCategoryResponse,
    ExpenseCategoryUpdate,
    ExpenseCreate,
    ExpenseReportItem,
    ExpenseReportLine,
    ExpenseResponse,
    ExpenseUpdate,
)

__all__ = [
    "AccountCreate",
    "AccountUpdate",
    "AccountResponse",
    "AdjustmentRequest",
    "ReversalRequest",
    "LedgerEntryResponse",
    "BalanceCheck",
    "AccountSummary",
    "MonthlyIncomeExpense",
    "IncomeExpenseSummary",
    "ExpenseCategoryCreate",
    "ExpenseCategoryUpdate",
    "ExpenseCategoryResponse",
    "ExpenseCreate",
    "ExpenseUpdate",
    "ExpenseResponse",
    "ExpenseReportLine",
    "ExpenseReportItem",
]

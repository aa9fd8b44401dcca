"""Accounts, ledger entries and expenses."""
from gym_billing.models.accounting.account import Account
from gym_billing.models.accounting.account_ledger_entry import AccountLedgerEntry
from gym_billing.models.accounting.expense import Expense
from gym_billing.models.accounting.expense_category import ExpenseCategory

__all__ = ["Account", "AccountLedgerEntry", "Expense", "ExpenseCategory"]

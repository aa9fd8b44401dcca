from gym_billing.services.accounting.account_service import AccountService
from gym_billing.services.accounting.expense_category_service import ExpenseCategoryService
from gym_billing.services.accounting.expense_service import ExpenseService
from gym_billing.services.accounting.ledger_service import LedgerService

__all__ = ["AccountService", "ExpenseCategoryService", "ExpenseService", "LedgerService"]

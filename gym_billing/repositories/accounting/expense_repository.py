"""Expense repository."""

from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from gym_billing.models.accounting.account import Account
from gym_billing.models.accounting.expense import Expense
from gym_billing.models.accounting.expense_category import ExpenseCategory
from gym_billing.repositories.base.base_repository import BaseRepository


class ExpenseRepository(BaseRepository[Expense]):
    def __init__(self, session: Session):
        super().__init__(Expense, session)

    @staticmethod
    def _filtered(
        stmt: Select,
        gym_id: int,
        start: Optional[date],
        end: Optional[date],
        category_id: Optional[int],
        account_id: Optional[int],
    ) -> Select:
        stmt = stmt.where(Expense.gym_id == gym_id)
        if start is not None:
            stmt = stmt.where(Expense.expense_date >= start)
        if end is not None:
            stmt = stmt.where(Expense.expense_date <= end)
        if category_id is not None:
            stmt = stmt.where(Expense.category_id == category_id)
        if account_id is not None:
            stmt = stmt.where(Expense.account_id == account_id)
        return stmt

    def search_query(
        self,
        gym_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
    ) -> Select:
        stmt = self._filtered(select(Expense), gym_id, start, end, category_id, account_id)
        return stmt.order_by(Expense.expense_date.desc(), Expense.id.desc())

    def report_rows(
        self,
        gym_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
    ) -> List[Tuple[Expense, ExpenseCategory, str]]:
        """Expenses with their category and account name, grouped by category name."""
        stmt = self._filtered(
            select(Expense, ExpenseCategory, Account.account_name)
            .join(ExpenseCategory, ExpenseCategory.id == Expense.category_id)
            .join(Account, Account.id == Expense.account_id),
            gym_id,
            start,
            end,
            category_id,
            account_id,
        )
        stmt = stmt.order_by(ExpenseCategory.name, ExpenseCategory.id, Expense.expense_date, Expense.id)
        return [tuple(row) for row in self.db.execute(stmt)]

    def count_for_category(self, category_id: int) -> int:
        stmt = select(func.count()).select_from(Expense).where(Expense.category_id == category_id)
        return self.db.scalar(stmt) or 0

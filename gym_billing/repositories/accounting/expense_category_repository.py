"""Expense category repository."""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from gym_billing.models.accounting.expense_category import ExpenseCategory
from gym_billing.repositories.base.base_repository import BaseRepository


class ExpenseCategoryRepository(BaseRepository[ExpenseCategory]):
    def __init__(self, session: Session):
        super().__init__(ExpenseCategory, session)

    def list_for_gym(self, gym_id: int, active_only: bool = False) -> List[ExpenseCategory]:
        stmt = select(ExpenseCategory).where(ExpenseCategory.gym_id == gym_id)
        if active_only:
            stmt = stmt.where(ExpenseCategory.is_active.is_(True))
        stmt = stmt.order_by(ExpenseCategory.name, ExpenseCategory.id)
        return list(self.db.scalars(stmt))

    def find_by_name(self, gym_id: int, name: str) -> Optional[ExpenseCategory]:
        """Case-insensitive name lookup within one gym."""
        stmt = select(ExpenseCategory).where(
            ExpenseCategory.gym_id == gym_id,
            func.lower(ExpenseCategory.name) == name.lower(),
        )
        return self.db.scalars(stmt).first()

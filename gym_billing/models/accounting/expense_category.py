"""Expense category model: the gym's own list of spending heads."""

from typing import Optional

from sqlalchemy import Boolean, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from gym_billing.models.base import TenantModel


class ExpenseCategory(TenantModel):
    __tablename__ = "expense_categories"
    __table_args__ = (UniqueConstraint("gym_id", "name", name="uq_expense_category_name_per_gym"),)

    name: Mapped[str] = mapped_column(String(80), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Inactive categories stay on old expenses but take no new ones
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    def __repr__(self) -> str:
        return f"<ExpenseCategory(id={self.id}, name='{self.name}', active={self.is_active})>"

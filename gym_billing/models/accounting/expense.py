"""Expense model: money paid out of an account for running the gym."""

from datetime import date as Date
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Date as SQLDate, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from gym_billing.models.base import Money, TenantModel


class Expense(TenantModel):
    """
    An expense and the ledger debit it produced.

    ``ledger_entry_id`` always points at the posting currently in force.
    Edits to amount, date or account reverse that posting and replace it.
    """

    __tablename__ = "expenses"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_expense_amount_positive"),)

    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[int] = mapped_column(
        ForeignKey("expense_categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    expense_date: Mapped[Date] = mapped_column(SQLDate, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    reference_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    ledger_entry_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("account_ledger_entries.id", ondelete="RESTRICT"),
        nullable=True,
    )

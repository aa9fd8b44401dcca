"""
Account ledger entry model.

Append-only per-account postings. Rows are never updated or deleted; an
undo is a new entry pointing at the entry it reverses.
"""

from datetime import date as Date
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Date as SQLDate, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from gym_billing.models.base import Money, ReferenceType, TenantModel, enum_type


class AccountLedgerEntry(TenantModel):
    """
    One posting against one account.

    Ordering within an account is ``(transaction_date, id)``; ``balance`` is
    the running balance after this entry in that order.
    """

    __tablename__ = "account_ledger_entries"
    __table_args__ = (
        CheckConstraint(
            "(debit > 0 AND credit = 0) OR (credit > 0 AND debit = 0)",
            name="ck_ledger_one_sided",
        ),
        Index("ix_ledger_account_order", "account_id", "transaction_date", "id"),
        Index("ix_ledger_reference", "reference_type", "reference_id"),
    )

    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="RESTRICT"),
        nullable=False,
    )
    transaction_date: Mapped[Date] = mapped_column(SQLDate, nullable=False)

    # ==================== Reference ====================
    reference_type: Mapped[ReferenceType] = mapped_column(
        enum_type(ReferenceType, "ledger_reference_type_enum"),
        nullable=False,
    )
    reference_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    reference_no: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # ==================== Amounts ====================
    debit: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0.00"))
    credit: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0.00"))
    balance: Mapped[Decimal] = mapped_column(Money, nullable=False)

    # ==================== Reversal ====================
    reverses_entry_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("account_ledger_entries.id", ondelete="RESTRICT"),
        nullable=True,
        unique=True,
        comment="Entry this one reverses; unique so an entry is reversed at most once",
    )

    @property
    def net_amount(self) -> Decimal:
        """Signed effect on the account balance."""
        return self.credit - self.debit

    @property
    def is_reversal(self) -> bool:
        return self.reverses_entry_id is not None

    def __repr__(self) -> str:
        return (
            f"<AccountLedgerEntry(id={self.id}, account_id={self.account_id}, "
            f"debit={self.debit}, credit={self.credit}, balance={self.balance})>"
        )

"""
Account model.

A bank or cash account that money flows into and out of. The
``current_balance`` column is a cache of the ledger and is only written by
the ledger posting path, inside the same transaction as the entry.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from gym_billing.models.base import AccountType, Money, TenantModel, enum_type


class Account(TenantModel):
    """Money account with a ledger-derived running balance."""

    __tablename__ = "accounts"

    account_name: Mapped[str] = mapped_column(String(120), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        enum_type(AccountType, "account_type_enum"),
        nullable=False,
        index=True,
    )
    bank_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)

    # ==================== Balances ====================
    opening_balance: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0.00"))
    current_balance: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
        default=Decimal("0.00"),
        comment="Cache of opening_balance + sum(credit) - sum(debit)",
    )

    # ==================== Flags ====================
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    def __repr__(self) -> str:
        return (
            f"<Account(id={self.id}, name='{self.account_name}', "
            f"type={self.account_type}, balance={self.current_balance})>"
        )

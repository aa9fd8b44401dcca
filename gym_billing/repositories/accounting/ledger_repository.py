"""
Account ledger repository.

Read side of the append-only ledger: latest entry per account, statements,
and totals used for balance verification and summaries.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from gym_billing.models.accounting.account_ledger_entry import AccountLedgerEntry
from gym_billing.models.base import ReferenceType
from gym_billing.repositories.base.base_repository import BaseRepository
from gym_billing.utils.money import to_money


class AccountLedgerEntryRepository(BaseRepository[AccountLedgerEntry]):
    """Repository for ledger entries."""

    def __init__(self, session: Session):
        super().__init__(AccountLedgerEntry, session)

    # ==================== Ordering ====================

    def latest_for_account(self, account_id: int) -> Optional[AccountLedgerEntry]:
        """Last entry in ``(transaction_date, id)`` order, or None."""
        stmt = (
            select(AccountLedgerEntry)
            .where(AccountLedgerEntry.account_id == account_id)
            .order_by(AccountLedgerEntry.transaction_date.desc(), AccountLedgerEntry.id.desc())
            .limit(1)
        )
        return self.db.scalars(stmt).first()

    def list_for_account(self, account_id: int) -> List[AccountLedgerEntry]:
        stmt = (
            select(AccountLedgerEntry)
            .where(AccountLedgerEntry.account_id == account_id)
            .order_by(AccountLedgerEntry.transaction_date, AccountLedgerEntry.id)
        )
        return list(self.db.scalars(stmt))

    def find_reversal(self, entry_id: int) -> Optional[AccountLedgerEntry]:
        stmt = select(AccountLedgerEntry).where(AccountLedgerEntry.reverses_entry_id == entry_id)
        return self.db.scalars(stmt).first()

    # ==================== Statements ====================

    def statement_query(
        self,
        gym_id: int,
        account_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        reference_types: Optional[Iterable[ReferenceType]] = None,
    ) -> Select:
        stmt = select(AccountLedgerEntry).where(
            AccountLedgerEntry.gym_id == gym_id,
            AccountLedgerEntry.account_id == account_id,
        )
        if start is not None:
            stmt = stmt.where(AccountLedgerEntry.transaction_date >= start)
        if end is not None:
            stmt = stmt.where(AccountLedgerEntry.transaction_date <= end)
        if reference_types:
            stmt = stmt.where(AccountLedgerEntry.reference_type.in_(list(reference_types)))
        return stmt.order_by(AccountLedgerEntry.transaction_date, AccountLedgerEntry.id)

    def entries_in_range(
        self,
        gym_id: int,
        start: date,
        end: date,
        reference_types: Iterable[ReferenceType],
    ) -> Sequence[AccountLedgerEntry]:
        stmt = (
            select(AccountLedgerEntry)
            .where(
                AccountLedgerEntry.gym_id == gym_id,
                AccountLedgerEntry.transaction_date >= start,
                AccountLedgerEntry.transaction_date <= end,
                AccountLedgerEntry.reference_type.in_(list(reference_types)),
            )
            .order_by(AccountLedgerEntry.transaction_date, AccountLedgerEntry.id)
        )
        return self.db.scalars(stmt).all()

    # ==================== Totals ====================

    def totals(
        self,
        account_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        before: Optional[date] = None,
    ) -> Tuple[Decimal, Decimal]:
        """
        Sum of credits and debits for an account.

        Returns:
            Tuple of (total credit, total debit)
        """
        stmt = select(
            func.coalesce(func.sum(AccountLedgerEntry.credit), 0),
            func.coalesce(func.sum(AccountLedgerEntry.debit), 0),
        ).where(AccountLedgerEntry.account_id == account_id)
        if start is not None:
            stmt = stmt.where(AccountLedgerEntry.transaction_date >= start)
        if end is not None:
            stmt = stmt.where(AccountLedgerEntry.transaction_date <= end)
        if before is not None:
            stmt = stmt.where(AccountLedgerEntry.transaction_date < before)
        credit, debit = self.db.execute(stmt).one()
        return to_money(credit), to_money(debit)

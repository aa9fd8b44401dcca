"""
Ledger Service

Append-only account ledger. Every posting appends one entry whose running
balance follows from the account's latest entry, and refreshes the
account's cached ``current_balance`` in the same transaction.

Composable steps (``post_in``, ``reverse_in``) take an open unit of work
so callers can make a posting part of their own state change.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from gym_billing.core.constants import ZERO
from gym_billing.core.pagination import normalize_pagination, paginate_items
from gym_billing.models.accounting.account import Account
from gym_billing.models.accounting.account_ledger_entry import AccountLedgerEntry
from gym_billing.models.base import ReferenceType
from gym_billing.repositories.accounting import AccountLedgerEntryRepository, AccountRepository
from gym_billing.schemas.accounting.account import LedgerEntryResponse
from gym_billing.schemas.common.pagination import PaginatedResponse
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services.base import BaseService
from gym_billing.services.common.errors import (
    AccountInactiveError,
    AccountNotFoundError,
    EntryAlreadyReversedError,
    InvalidAmountError,
    InvalidPostingDateError,
    LedgerEntryNotFoundError,
)
from gym_billing.services.common.mapping import to_schema
from gym_billing.services.common.unit_of_work import UnitOfWork
from gym_billing.services.common.validators import money


class LedgerService(BaseService):
    """Posting, reversal and statements for account ledgers."""

    # ==================== Public operations ====================

    def post(
        self,
        ctx: GymContext,
        account_id: int,
        reference_type: ReferenceType,
        reference_id: Optional[int],
        debit: Decimal = ZERO,
        credit: Decimal = ZERO,
        transaction_date: Optional[date] = None,
        description: Optional[str] = None,
        reference_no: Optional[str] = None,
    ) -> LedgerEntryResponse:
        """
        Append one entry to an account's ledger.

        Exactly one of ``debit`` / ``credit`` must be positive. The date
        defaults to today in the gym's timezone.

        Raises:
            InvalidAmountError: Both amounts zero, both non-zero, or negative
            InvalidPostingDateError: Date after today, or earlier than the
                account's latest entry
            AccountNotFoundError: No such account in the gym
            AccountInactiveError: The account is deactivated
        """
        debit, credit = self.validate_amounts(debit, credit)
        with self._operation("ledger.post", gym_id=ctx.gym_id, account_id=account_id):
            with self.unit_of_work() as uow:
                entry = self.post_in(
                    uow,
                    ctx,
                    account_id=account_id,
                    reference_type=reference_type,
                    reference_id=reference_id,
                    debit=debit,
                    credit=credit,
                    transaction_date=transaction_date,
                    description=description,
                    reference_no=reference_no,
                )
                return to_schema(entry, LedgerEntryResponse)

    def reverse(
        self,
        ctx: GymContext,
        entry_id: int,
        description: Optional[str] = None,
    ) -> LedgerEntryResponse:
        """
        Post the equal-and-opposite of an entry.

        History is never edited; the original stays and the new entry
        records which entry it reverses.

        Raises:
            LedgerEntryNotFoundError: No such entry in the gym
            EntryAlreadyReversedError: The entry already has a reversal
        """
        with self._operation("ledger.reverse", gym_id=ctx.gym_id, entry_id=entry_id):
            with self.unit_of_work() as uow:
                entry = self.reverse_in(uow, ctx, entry_id, description=description)
                return to_schema(entry, LedgerEntryResponse)

    def ledger_for(
        self,
        ctx: GymContext,
        account_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        reference_types: Optional[Iterable[ReferenceType]] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> PaginatedResponse[LedgerEntryResponse]:
        """Entries of one account in ``(transaction_date, id)`` order, paginated."""
        params = normalize_pagination(page, page_size)
        with self.unit_of_work() as uow:
            if uow.get_repo(AccountRepository).find_in_gym(ctx.gym_id, account_id) is None:
                raise AccountNotFoundError(account_id)
            entries = uow.get_repo(AccountLedgerEntryRepository)
            stmt = entries.statement_query(ctx.gym_id, account_id, start, end, reference_types)
            items, total = entries.paginate(stmt, params)
            return paginate_items(
                items=items,
                total_items=total,
                params=params,
                mapper=lambda e: to_schema(e, LedgerEntryResponse),
            )

    def get_entry(self, ctx: GymContext, entry_id: int) -> LedgerEntryResponse:
        with self.unit_of_work() as uow:
            entry = uow.get_repo(AccountLedgerEntryRepository).find_in_gym(ctx.gym_id, entry_id)
            if entry is None:
                raise LedgerEntryNotFoundError(entry_id)
            return to_schema(entry, LedgerEntryResponse)

    # ==================== Composable steps ====================

    @staticmethod
    def validate_amounts(debit: Decimal, credit: Decimal) -> tuple:
        """
        Check that exactly one side of a posting is positive.

        Returns:
            Tuple of (debit, credit) quantized to two places
        """
        debit = money(debit, "debit")
        credit = money(credit, "credit")
        if (debit > ZERO) == (credit > ZERO):
            raise InvalidAmountError(
                "Exactly one of debit or credit must be greater than zero",
                details={"debit": debit, "credit": credit},
            )
        return debit, credit

    def post_in(
        self,
        uow: UnitOfWork,
        ctx: GymContext,
        account_id: int,
        reference_type: ReferenceType,
        reference_id: Optional[int],
        debit: Decimal = ZERO,
        credit: Decimal = ZERO,
        transaction_date: Optional[date] = None,
        description: Optional[str] = None,
        reference_no: Optional[str] = None,
    ) -> AccountLedgerEntry:
        """Append an entry inside the caller's unit of work."""
        debit, credit = self.validate_amounts(debit, credit)
        today = self._today(ctx)
        if transaction_date is not None and transaction_date > today:
            raise InvalidPostingDateError(
                f"Posting date {transaction_date} is in the future (today is {today})",
                field="transaction_date",
                details={
                    "account_id": account_id,
                    "transaction_date": transaction_date.isoformat(),
                    "today": today.isoformat(),
                },
            )

        account = self.lock_account_in(uow, ctx, account_id)
        if not account.is_active:
            raise AccountInactiveError(account_id)

        latest = uow.get_repo(AccountLedgerEntryRepository).latest_for_account(account.id)
        posting_date = transaction_date or today
        if latest is not None and posting_date < latest.transaction_date:
            raise InvalidPostingDateError(
                f"Posting date {posting_date} is before the latest entry on "
                f"account {account_id} ({latest.transaction_date})",
                field="transaction_date",
                details={
                    "account_id": account_id,
                    "transaction_date": posting_date.isoformat(),
                    "latest_entry_date": latest.transaction_date.isoformat(),
                },
            )

        return self._append(
            uow,
            ctx,
            account,
            latest,
            posting_date=posting_date,
            reference_type=reference_type,
            reference_id=reference_id,
            debit=debit,
            credit=credit,
            description=description,
            reference_no=reference_no,
        )

    def reverse_in(
        self,
        uow: UnitOfWork,
        ctx: GymContext,
        entry_id: int,
        description: Optional[str] = None,
    ) -> AccountLedgerEntry:
        """
        Reverse an entry inside the caller's unit of work.

        Reversals are allowed on inactive accounts. The reversal is dated
        today, or the account's latest entry date if that is later, so the
        ledger order is preserved.
        """
        entries = uow.get_repo(AccountLedgerEntryRepository)
        original = entries.find_in_gym(ctx.gym_id, entry_id)
        if original is None:
            raise LedgerEntryNotFoundError(entry_id)

        account = self.lock_account_in(uow, ctx, original.account_id)
        if entries.find_reversal(original.id) is not None:
            raise EntryAlreadyReversedError(entry_id)

        latest = entries.latest_for_account(account.id)
        posting_date = self._today(ctx)
        if latest is not None and latest.transaction_date > posting_date:
            posting_date = latest.transaction_date

        return self._append(
            uow,
            ctx,
            account,
            latest,
            posting_date=posting_date,
            reference_type=original.reference_type,
            reference_id=original.reference_id,
            debit=original.credit,
            credit=original.debit,
            description=description or f"Reversal of entry {original.id}",
            reference_no=original.reference_no,
            reverses_entry_id=original.id,
        )

    # ==================== Internals ====================

    def lock_account_in(self, uow: UnitOfWork, ctx: GymContext, account_id: int) -> Account:
        """Load an account row locked until the unit of work ends."""
        account = uow.get_repo(AccountRepository).find_in_gym(ctx.gym_id, account_id, for_update=True)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def _append(
        self,
        uow: UnitOfWork,
        ctx: GymContext,
        account: Account,
        latest: Optional[AccountLedgerEntry],
        *,
        posting_date: date,
        reference_type: ReferenceType,
        reference_id: Optional[int],
        debit: Decimal,
        credit: Decimal,
        description: Optional[str],
        reference_no: Optional[str],
        reverses_entry_id: Optional[int] = None,
    ) -> AccountLedgerEntry:
        previous = latest.balance if latest is not None else account.opening_balance
        balance = previous + credit - debit

        entry = uow.get_repo(AccountLedgerEntryRepository).add(
            AccountLedgerEntry(
                gym_id=ctx.gym_id,
                account_id=account.id,
                transaction_date=posting_date,
                reference_type=reference_type,
                reference_id=reference_id,
                reference_no=reference_no,
                description=description,
                debit=debit,
                credit=credit,
                balance=balance,
                reverses_entry_id=reverses_entry_id,
            )
        )
        account.current_balance = balance
        uow.flush()

        self._logger.info(
            "ledger.posted",
            gym_id=ctx.gym_id,
            account_id=account.id,
            entry_id=entry.id,
            reference_type=reference_type.value,
            reference_id=reference_id,
            debit=str(debit),
            credit=str(credit),
            balance=str(balance),
            reverses_entry_id=reverses_entry_id,
        )
        return entry

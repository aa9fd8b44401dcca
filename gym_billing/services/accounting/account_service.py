"""
Account Service

Bank and cash account management plus the read-side reports that are
computed from the ledger: balance verification, per-account summaries and
income against expense.
"""

from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import List, Optional

from gym_billing.core.constants import ZERO
from gym_billing.models.accounting.account import Account
from gym_billing.models.base import AccountType, ReferenceType
from gym_billing.repositories.accounting import AccountLedgerEntryRepository, AccountRepository
from gym_billing.schemas.accounting.account import (
    AccountResponse,
    AccountSummary,
    BalanceCheck,
    IncomeExpenseSummary,
    LedgerEntryResponse,
    MonthlyIncomeExpense,
)
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services.accounting.ledger_service import LedgerService
from gym_billing.services.base import BaseService
from gym_billing.services.common.errors import (
    AccountNotFoundError,
    DefaultAccountError,
    ValidationError,
)
from gym_billing.services.common.mapping import to_schema, to_schema_list
from gym_billing.services.common.validators import money
from gym_billing.utils.datetime_utils import DateRangeHelper

INCOME_TYPES = (ReferenceType.FEE,)
EXPENSE_TYPES = (ReferenceType.EXPENSE, ReferenceType.SALARY_PAYMENT)


class AccountService(BaseService):
    """Account lifecycle and ledger-derived reports."""

    def __init__(self, session_factory, clock=None):
        super().__init__(session_factory, clock)
        self.ledger = LedgerService(session_factory, clock)

    # ==================== Lifecycle ====================

    def create_account(
        self,
        ctx: GymContext,
        account_name: str,
        account_type: AccountType,
        opening_balance: Decimal = ZERO,
        bank_name: Optional[str] = None,
        is_default: bool = False,
    ) -> AccountResponse:
        """
        Create an account. ``current_balance`` starts at ``opening_balance``.

        Making the account the default clears the flag on every other
        account of the same type.
        """
        opening_balance = money(opening_balance, "opening_balance")
        if not account_name or not account_name.strip():
            raise ValidationError("Account name is required", field="account_name")

        with self._operation("account.create", gym_id=ctx.gym_id):
            with self.unit_of_work() as uow:
                accounts = uow.get_repo(AccountRepository)
                if is_default:
                    accounts.clear_default(ctx.gym_id, account_type)
                account = accounts.add(
                    Account(
                        gym_id=ctx.gym_id,
                        account_name=account_name.strip(),
                        account_type=account_type,
                        bank_name=bank_name,
                        opening_balance=opening_balance,
                        current_balance=opening_balance,
                        is_default=is_default,
                        is_active=True,
                    )
                )
                self._logger.info(
                    "account.created",
                    gym_id=ctx.gym_id,
                    account_id=account.id,
                    account_type=account_type.value,
                    opening_balance=str(opening_balance),
                )
                return to_schema(account, AccountResponse)

    def update_account(
        self,
        ctx: GymContext,
        account_id: int,
        account_name: Optional[str] = None,
        bank_name: Optional[str] = None,
    ) -> AccountResponse:
        """Rename an account. Balances are never edited here."""
        with self.unit_of_work() as uow:
            account = self._get(uow, ctx, account_id)
            if account_name is not None:
                if not account_name.strip():
                    raise ValidationError("Account name is required", field="account_name")
                account.account_name = account_name.strip()
            if bank_name is not None:
                account.bank_name = bank_name
            uow.flush()
            return to_schema(account, AccountResponse)

    def set_default(self, ctx: GymContext, account_id: int) -> AccountResponse:
        with self.unit_of_work() as uow:
            account = self._get(uow, ctx, account_id)
            uow.get_repo(AccountRepository).clear_default(
                ctx.gym_id, account.account_type, except_id=account.id
            )
            account.is_default = True
            uow.flush()
            self._logger.info("account.default_set", gym_id=ctx.gym_id, account_id=account.id)
            return to_schema(account, AccountResponse)

    def deactivate_account(self, ctx: GymContext, account_id: int) -> AccountResponse:
        """
        Stop new postings to an account. Reversals are still accepted.

        Raises:
            DefaultAccountError: The account is the default of its type
        """
        with self._operation("account.deactivate", gym_id=ctx.gym_id, account_id=account_id):
            with self.unit_of_work() as uow:
                account = self._get(uow, ctx, account_id, for_update=True)
                if account.is_default:
                    raise DefaultAccountError(
                        f"Account {account_id} is the default {account.account_type.value} "
                        "account and cannot be deactivated",
                        {"account_id": account_id},
                    )
                account.is_active = False
                uow.flush()
                self._logger.info("account.deactivated", gym_id=ctx.gym_id, account_id=account_id)
                return to_schema(account, AccountResponse)

    def activate_account(self, ctx: GymContext, account_id: int) -> AccountResponse:
        with self.unit_of_work() as uow:
            account = self._get(uow, ctx, account_id, for_update=True)
            account.is_active = True
            uow.flush()
            self._logger.info("account.activated", gym_id=ctx.gym_id, account_id=account_id)
            return to_schema(account, AccountResponse)

    # ==================== Queries ====================

    def get_account(self, ctx: GymContext, account_id: int) -> AccountResponse:
        with self.unit_of_work() as uow:
            return to_schema(self._get(uow, ctx, account_id), AccountResponse)

    def list_accounts(self, ctx: GymContext, active_only: bool = False) -> List[AccountResponse]:
        with self.unit_of_work() as uow:
            accounts = uow.get_repo(AccountRepository).list_for_gym(ctx.gym_id, active_only)
            return to_schema_list(accounts, AccountResponse)

    def get_default_cash_account(self, ctx: GymContext) -> Optional[AccountResponse]:
        """Default cash account, or None when the gym has not chosen one."""
        with self.unit_of_work() as uow:
            account = uow.get_repo(AccountRepository).find_default(ctx.gym_id, AccountType.CASH)
            return to_schema(account, AccountResponse) if account is not None else None

    # ==================== Adjustments ====================

    def adjust_balance(
        self,
        ctx: GymContext,
        account_id: int,
        amount: Decimal,
        note: str,
        transaction_date: Optional[date] = None,
    ) -> LedgerEntryResponse:
        """
        Correct an account balance through an Adjustment posting.

        A positive amount credits the account, a negative one debits it.
        """
        amount = money(amount, "amount", allow_zero=False, allow_negative=True)
        debit, credit = (ZERO, amount) if amount > ZERO else (-amount, ZERO)
        return self.ledger.post(
            ctx,
            account_id=account_id,
            reference_type=ReferenceType.ADJUSTMENT,
            reference_id=None,
            debit=debit,
            credit=credit,
            transaction_date=transaction_date,
            description=note,
        )

    # ==================== Reports ====================

    def verify_balance(self, ctx: GymContext, account_id: int) -> BalanceCheck:
        """
        Recompute a balance from the ledger and compare it with the cache.

        Drift is reported, never repaired.
        """
        with self.unit_of_work() as uow:
            account = self._get(uow, ctx, account_id)
            entries = uow.get_repo(AccountLedgerEntryRepository).list_for_account(account.id)

            running = account.opening_balance
            consistent = True
            total_credit = ZERO
            total_debit = ZERO
            for entry in entries:
                running = running + entry.credit - entry.debit
                total_credit += entry.credit
                total_debit += entry.debit
                if entry.balance != running:
                    consistent = False

            computed = account.opening_balance + total_credit - total_debit
            matches = computed == account.current_balance and consistent
            if not matches:
                self._logger.error(
                    "account.balance_drift",
                    gym_id=ctx.gym_id,
                    account_id=account.id,
                    cached=str(account.current_balance),
                    computed=str(computed),
                    running_balance_consistent=consistent,
                )
            return BalanceCheck(
                account_id=account.id,
                opening_balance=account.opening_balance,
                total_credit=total_credit,
                total_debit=total_debit,
                cached_balance=account.current_balance,
                computed_balance=computed,
                entry_count=len(entries),
                running_balance_consistent=consistent,
                matches=matches,
            )

    def account_summary(
        self,
        ctx: GymContext,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[AccountSummary]:
        """Opening balance at ``start``, movements in the range and closing balance, per account."""
        start, end = DateRangeHelper.clamp_range(start, end)
        with self.unit_of_work() as uow:
            entries = uow.get_repo(AccountLedgerEntryRepository)
            summaries = []
            for account in uow.get_repo(AccountRepository).list_for_gym(ctx.gym_id):
                opening = account.opening_balance
                if start is not None:
                    before_credit, before_debit = entries.totals(account.id, before=start)
                    opening = opening + before_credit - before_debit
                credit, debit = entries.totals(account.id, start=start, end=end)
                summaries.append(
                    AccountSummary(
                        account_id=account.id,
                        account_name=account.account_name,
                        account_type=account.account_type,
                        is_active=account.is_active,
                        opening_balance=opening,
                        total_credit=credit,
                        total_debit=debit,
                        closing_balance=opening + credit - debit,
                    )
                )
            return summaries

    def income_expense_summary(
        self,
        ctx: GymContext,
        start: date,
        end: date,
    ) -> IncomeExpenseSummary:
        """
        Income against expense per month.

        Income is Fee postings, expense is Expense and SalaryPayment
        postings. Reversals carry the original reference type, so a
        reversed payment nets out of the month it is reversed in.
        """
        if start > end:
            raise ValidationError(
                "start date must not be after end date",
                field="start",
                details={"start": start.isoformat(), "end": end.isoformat()},
            )

        months = OrderedDict(
            ((year, month), [ZERO, ZERO]) for year, month in DateRangeHelper.iter_months(start, end)
        )
        with self.unit_of_work() as uow:
            rows = uow.get_repo(AccountLedgerEntryRepository).entries_in_range(
                ctx.gym_id, start, end, INCOME_TYPES + EXPENSE_TYPES
            )
            for entry in rows:
                bucket = months[(entry.transaction_date.year, entry.transaction_date.month)]
                if entry.reference_type in INCOME_TYPES:
                    bucket[0] += entry.credit - entry.debit
                else:
                    bucket[1] += entry.debit - entry.credit

        monthly = [
            MonthlyIncomeExpense(year=y, month=m, income=inc, expense=exp, net=inc - exp)
            for (y, m), (inc, exp) in months.items()
        ]
        total_income = sum((m.income for m in monthly), ZERO)
        total_expense = sum((m.expense for m in monthly), ZERO)
        return IncomeExpenseSummary(
            start_date=start,
            end_date=end,
            total_income=total_income,
            total_expense=total_expense,
            net=total_income - total_expense,
            months=monthly,
        )

    # ==================== Internals ====================

    @staticmethod
    def _get(uow, ctx: GymContext, account_id: int, for_update: bool = False) -> Account:
        account = uow.get_repo(AccountRepository).find_in_gym(ctx.gym_id, account_id, for_update)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

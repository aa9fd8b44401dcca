"""
Expense Service

Records money paid out for running the gym. Each expense row and its
ledger debit are written in one unit of work.
"""

from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import List, Optional

from gym_billing.core.constants import ZERO
from gym_billing.core.pagination import normalize_pagination, paginate_items
from gym_billing.models.accounting.account_ledger_entry import AccountLedgerEntry
from gym_billing.models.accounting.expense import Expense
from gym_billing.models.base import ReferenceType
from gym_billing.repositories.accounting import AccountLedgerEntryRepository, ExpenseRepository
from gym_billing.schemas.accounting.expense import ExpenseReportItem, ExpenseReportLine, ExpenseResponse
from gym_billing.schemas.common.pagination import PaginatedResponse
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services.accounting.expense_category_service import ExpenseCategoryService
from gym_billing.services.accounting.ledger_service import LedgerService
from gym_billing.services.base import BaseService
from gym_billing.services.common.errors import ExpenseNotFoundError, ValidationError
from gym_billing.services.common.mapping import to_schema
from gym_billing.services.common.unit_of_work import UnitOfWork
from gym_billing.services.common.validators import positive_money


class ExpenseService(BaseService):
    def __init__(self, session_factory, clock=None):
        super().__init__(session_factory, clock)
        self.ledger = LedgerService(session_factory, clock)
        self.categories = ExpenseCategoryService(session_factory, clock)

    def record_expense(
        self,
        ctx: GymContext,
        account_id: int,
        amount: Decimal,
        category_id: int,
        expense_date: Optional[date] = None,
        description: Optional[str] = None,
        reference_number: Optional[str] = None,
    ) -> ExpenseResponse:
        """
        Create an expense and debit ``account_id`` by ``amount``.

        The debit is dated ``expense_date`` (default: today), which may not
        be in the future or before the account's latest entry.
        """
        amount = positive_money(amount, "amount")

        with self._operation("expense.record", gym_id=ctx.gym_id, account_id=account_id):
            with self.unit_of_work() as uow:
                category = self.categories.require_active_in(uow, ctx, category_id)
                self.ledger.lock_account_in(uow, ctx, account_id)
                expense = uow.get_repo(ExpenseRepository).add(
                    Expense(
                        gym_id=ctx.gym_id,
                        account_id=account_id,
                        category_id=category.id,
                        expense_date=expense_date or self._today(ctx),
                        description=description,
                        amount=amount,
                        reference_number=reference_number,
                    )
                )
                entry = self._post_in(uow, ctx, expense, category.name, expense.expense_date)
                expense.ledger_entry_id = entry.id
                uow.flush()

                self._logger.info(
                    "expense.recorded",
                    gym_id=ctx.gym_id,
                    expense_id=expense.id,
                    account_id=account_id,
                    amount=str(amount),
                    category_id=category.id,
                )
                return to_schema(expense, ExpenseResponse)

    def update_expense(
        self,
        ctx: GymContext,
        expense_id: int,
        account_id: Optional[int] = None,
        amount: Optional[Decimal] = None,
        category_id: Optional[int] = None,
        expense_date: Optional[date] = None,
        description: Optional[str] = None,
        reference_number: Optional[str] = None,
    ) -> ExpenseResponse:
        """
        Edit an expense. ``None`` leaves a field as is.

        Changing amount, date or account reverses the current ledger debit
        and posts a replacement in the same transaction. The replacement is
        dated ``expense_date``, or the target account's latest entry date
        if that is later. Category, description and reference edits leave
        the ledger alone.

        Raises:
            ExpenseNotFoundError: No such expense in the gym
            ExpenseCategoryInactiveError: Moving to a deactivated category
            InvalidPostingDateError: New date is in the future
            AccountInactiveError: Moving to a deactivated account
        """
        if amount is not None:
            amount = positive_money(amount, "amount")

        with self._operation("expense.update", gym_id=ctx.gym_id, expense_id=expense_id):
            with self.unit_of_work() as uow:
                expense = uow.get_repo(ExpenseRepository).find_in_gym(ctx.gym_id, expense_id, for_update=True)
                if expense is None:
                    raise ExpenseNotFoundError(expense_id)

                if category_id is not None and category_id != expense.category_id:
                    expense.category_id = self.categories.require_active_in(uow, ctx, category_id).id
                if description is not None:
                    expense.description = description
                if reference_number is not None:
                    expense.reference_number = reference_number

                reposted = (
                    (amount is not None and amount != expense.amount)
                    or (account_id is not None and account_id != expense.account_id)
                    or (expense_date is not None and expense_date != expense.expense_date)
                )
                if reposted:
                    if expense.ledger_entry_id is not None:
                        self.ledger.reverse_in(
                            uow,
                            ctx,
                            expense.ledger_entry_id,
                            description=f"Expense {expense.id} edited",
                        )
                    if amount is not None:
                        expense.amount = amount
                    if account_id is not None:
                        expense.account_id = account_id
                    if expense_date is not None:
                        expense.expense_date = expense_date

                    latest = uow.get_repo(AccountLedgerEntryRepository).latest_for_account(expense.account_id)
                    posting_date = expense.expense_date
                    if latest is not None and latest.transaction_date > posting_date:
                        posting_date = latest.transaction_date
                    category = self.categories.get_category_in(uow, ctx, expense.category_id)
                    expense.ledger_entry_id = self._post_in(uow, ctx, expense, category.name, posting_date).id
                uow.flush()

                self._logger.info(
                    "expense.updated",
                    gym_id=ctx.gym_id,
                    expense_id=expense.id,
                    reposted=reposted,
                    ledger_entry_id=expense.ledger_entry_id,
                )
                return to_schema(expense, ExpenseResponse)

    def delete_expense(self, ctx: GymContext, expense_id: int) -> None:
        """Reverse the expense's ledger debit and remove the expense."""
        with self._operation("expense.delete", gym_id=ctx.gym_id, expense_id=expense_id):
            with self.unit_of_work() as uow:
                expenses = uow.get_repo(ExpenseRepository)
                expense = expenses.find_in_gym(ctx.gym_id, expense_id, for_update=True)
                if expense is None:
                    raise ExpenseNotFoundError(expense_id)
                if expense.ledger_entry_id is not None:
                    self.ledger.reverse_in(
                        uow,
                        ctx,
                        expense.ledger_entry_id,
                        description=f"Expense {expense.id} deleted",
                    )
                expenses.delete(expense)
                self._logger.info("expense.deleted", gym_id=ctx.gym_id, expense_id=expense_id)

    def get_expense(self, ctx: GymContext, expense_id: int) -> ExpenseResponse:
        with self.unit_of_work() as uow:
            expense = uow.get_repo(ExpenseRepository).find_in_gym(ctx.gym_id, expense_id)
            if expense is None:
                raise ExpenseNotFoundError(expense_id)
            return to_schema(expense, ExpenseResponse)

    def list_expenses(
        self,
        ctx: GymContext,
        start: Optional[date] = None,
        end: Optional[date] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> PaginatedResponse[ExpenseResponse]:
        params = normalize_pagination(page, page_size)
        with self.unit_of_work() as uow:
            expenses = uow.get_repo(ExpenseRepository)
            stmt = expenses.search_query(ctx.gym_id, start, end, category_id, account_id)
            items, total = expenses.paginate(stmt, params)
            return paginate_items(
                items=items,
                total_items=total,
                params=params,
                mapper=lambda e: to_schema(e, ExpenseResponse),
            )

    # ==================== Reports ====================

    def expense_report(
        self,
        ctx: GymContext,
        start: Optional[date] = None,
        end: Optional[date] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
    ) -> List[ExpenseReportItem]:
        """Per-category totals, counts and lines, ordered by category name."""
        if start is not None and end is not None and start > end:
            raise ValidationError(
                "start date must not be after end date",
                field="start",
                details={"start": start.isoformat(), "end": end.isoformat()},
            )

        groups = OrderedDict()
        with self.unit_of_work() as uow:
            rows = uow.get_repo(ExpenseRepository).report_rows(ctx.gym_id, start, end, category_id, account_id)
            for expense, category, account_name in rows:
                group = groups.setdefault(category.id, (category.name, []))
                group[1].append(
                    ExpenseReportLine(
                        expense_id=expense.id,
                        expense_date=expense.expense_date,
                        description=expense.description,
                        amount=expense.amount,
                        account_name=account_name,
                    )
                )

        return [
            ExpenseReportItem(
                category_id=cid,
                category_name=name,
                total_amount=sum((line.amount for line in lines), ZERO),
                expense_count=len(lines),
                expenses=lines,
            )
            for cid, (name, lines) in groups.items()
        ]

    # ==================== Internals ====================

    def _post_in(
        self,
        uow: UnitOfWork,
        ctx: GymContext,
        expense: Expense,
        category_name: str,
        transaction_date: date,
    ) -> AccountLedgerEntry:
        return self.ledger.post_in(
            uow,
            ctx,
            account_id=expense.account_id,
            reference_type=ReferenceType.EXPENSE,
            reference_id=expense.id,
            debit=expense.amount,
            transaction_date=transaction_date,
            description=expense.description or category_name,
            reference_no=expense.reference_number,
        )

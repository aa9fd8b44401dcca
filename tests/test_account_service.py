from datetime import date
from decimal import Decimal

import pytest

from gym_billing.models import AccountType, ReferenceType
from gym_billing.services.common.errors import (
    AccountNotFoundError,
    DefaultAccountError,
    InvalidAmountError,
    InvalidPostingDateError,
    ValidationError,
)


def test_create_account_starts_at_opening_balance(accounts, ctx):
    account = accounts.create_account(
        ctx,
        account_name="  Petty cash  ",
        account_type=AccountType.CASH,
        opening_balance=Decimal("120.5"),
    )

    assert account.account_name == "Petty cash"
    assert account.opening_balance == Decimal("120.50")
    assert account.current_balance == Decimal("120.50")
    assert account.is_active
    assert not account.is_default
    assert account.gym_id == ctx.gym_id


def test_negative_opening_balance_rejected(accounts, ctx):
    with pytest.raises(InvalidAmountError):
        accounts.create_account(ctx, "Cash", AccountType.CASH, opening_balance=Decimal("-1"))


def test_blank_name_rejected(accounts, ctx):
    with pytest.raises(ValidationError):
        accounts.create_account(ctx, "   ", AccountType.CASH)


def test_new_default_replaces_previous_default_of_same_type(accounts, ctx, cash_account, bank_account):
    second_cash = accounts.create_account(ctx, "Back office cash", AccountType.CASH, is_default=True)

    assert accounts.get_account(ctx, second_cash.id).is_default
    assert not accounts.get_account(ctx, cash_account.id).is_default
    assert accounts.get_default_cash_account(ctx).id == second_cash.id

    accounts.set_default(ctx, cash_account.id)
    assert accounts.get_default_cash_account(ctx).id == cash_account.id
    assert not accounts.get_account(ctx, second_cash.id).is_default


def test_default_account_cannot_be_deactivated(accounts, ctx, cash_account):
    with pytest.raises(DefaultAccountError):
        accounts.deactivate_account(ctx, cash_account.id)


def test_deactivate_and_activate(accounts, ctx, cash_account, bank_account):
    accounts.deactivate_account(ctx, bank_account.id)

    active = accounts.list_accounts(ctx, active_only=True)
    assert [a.id for a in active] == [cash_account.id]
    assert len(accounts.list_accounts(ctx)) == 2

    assert accounts.activate_account(ctx, bank_account.id).is_active


def test_update_account_renames(accounts, ctx, bank_account):
    updated = accounts.update_account(ctx, bank_account.id, account_name="Salary account")

    assert updated.account_name == "Salary account"
    assert updated.bank_name == "State Bank"
    assert updated.current_balance == Decimal("10000.00")


def test_get_account_of_other_gym(accounts, other_ctx, cash_account):
    with pytest.raises(AccountNotFoundError):
        accounts.get_account(other_ctx, cash_account.id)


def test_no_default_cash_account(accounts, ctx, bank_account):
    assert accounts.get_default_cash_account(ctx) is None


def test_adjustments_credit_or_debit_by_sign(accounts, ctx, cash_account):
    up = accounts.adjust_balance(ctx, cash_account.id, Decimal("25.00"), note="Till count surplus")
    down = accounts.adjust_balance(ctx, cash_account.id, Decimal("-40.00"), note="Till count shortfall")

    assert up.reference_type is ReferenceType.ADJUSTMENT
    assert up.credit == Decimal("25.00")
    assert down.debit == Decimal("40.00")
    assert down.description == "Till count shortfall"
    assert accounts.get_account(ctx, cash_account.id).current_balance == Decimal("485.00")


def test_zero_adjustment_rejected(accounts, ctx, cash_account):
    with pytest.raises(InvalidAmountError):
        accounts.adjust_balance(ctx, cash_account.id, Decimal("0"), note="nothing")


def test_future_dated_adjustment_is_rejected_and_later_postings_still_work(
    accounts, ledger, ctx, cash_account
):
    with pytest.raises(InvalidPostingDateError):
        accounts.adjust_balance(
            ctx,
            cash_account.id,
            Decimal("30.00"),
            note="Next week's float",
            transaction_date=date(2024, 3, 22),
        )

    entry = ledger.post(ctx, cash_account.id, ReferenceType.FEE, 1, credit=Decimal("10.00"))
    assert entry.transaction_date == date(2024, 3, 15)
    assert accounts.get_account(ctx, cash_account.id).current_balance == Decimal("510.00")


def test_account_summary_over_range(accounts, ledger, ctx, cash_account, clock):
    ledger.post(ctx, cash_account.id, ReferenceType.FEE, 1, credit=Decimal("100.00"))
    clock.advance(days=20)
    ledger.post(ctx, cash_account.id, ReferenceType.FEE, 2, credit=Decimal("50.00"))
    ledger.post(ctx, cash_account.id, ReferenceType.EXPENSE, 3, debit=Decimal("30.00"))

    [summary] = accounts.account_summary(ctx, start=date(2024, 4, 1), end=date(2024, 4, 30))

    assert summary.opening_balance == Decimal("600.00")
    assert summary.total_credit == Decimal("50.00")
    assert summary.total_debit == Decimal("30.00")
    assert summary.closing_balance == Decimal("620.00")


def test_income_expense_summary_per_month(accounts, ledger, expenses, ctx, cash_account, clock, utilities):
    fee = ledger.post(ctx, cash_account.id, ReferenceType.FEE, 1, credit=Decimal("1000.00"))
    expenses.record_expense(ctx, cash_account.id, Decimal("200.00"), category_id=utilities.id)
    ledger.post(ctx, cash_account.id, ReferenceType.ADJUSTMENT, None, credit=Decimal("5.00"))
    clock.advance(days=20)
    ledger.post(ctx, cash_account.id, ReferenceType.SALARY_PAYMENT, 9, debit=Decimal("300.00"))
    ledger.reverse(ctx, fee.id)

    summary = accounts.income_expense_summary(ctx, date(2024, 3, 1), date(2024, 4, 30))

    march, april = summary.months
    assert (march.month, march.income, march.expense) == (3, Decimal("1000.00"), Decimal("200.00"))
    assert (april.month, april.income, april.expense) == (4, Decimal("-1000.00"), Decimal("300.00"))
    assert summary.total_income == Decimal("0.00")
    assert summary.total_expense == Decimal("500.00")
    assert summary.net == Decimal("-500.00")


def test_income_expense_summary_rejects_inverted_range(accounts, ctx):
    with pytest.raises(ValidationError):
        accounts.income_expense_summary(ctx, date(2024, 4, 1), date(2024, 3, 1))

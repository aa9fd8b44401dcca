from datetime import date
from decimal import Decimal

import pytest

from gym_billing.models import Account, AccountLedgerEntry, ReferenceType
from gym_billing.services.common.errors import (
    AccountInactiveError,
    AccountNotFoundError,
    EntryAlreadyReversedError,
    InvalidAmountError,
    InvalidPostingDateError,
    LedgerEntryNotFoundError,
)


def test_first_posting_starts_from_opening_balance(ledger, accounts, ctx, cash_account):
    entry = ledger.post(
        ctx,
        cash_account.id,
        ReferenceType.FEE,
        reference_id=11,
        credit=Decimal("250.00"),
    )

    assert entry.balance == Decimal("750.00")
    assert entry.transaction_date == date(2024, 3, 15)
    assert accounts.get_account(ctx, cash_account.id).current_balance == Decimal("750.00")


def test_running_balance_follows_every_entry(ledger, accounts, ctx, cash_account):
    ledger.post(ctx, cash_account.id, ReferenceType.FEE, 1, credit=Decimal("100.00"))
    ledger.post(ctx, cash_account.id, ReferenceType.EXPENSE, 2, debit=Decimal("40.00"))
    ledger.post(ctx, cash_account.id, ReferenceType.FEE, 3, credit=Decimal("15.50"))

    statement = ledger.ledger_for(ctx, cash_account.id)
    balances = [e.balance for e in statement.items]

    assert balances == [Decimal("600.00"), Decimal("560.00"), Decimal("575.50")]
    assert statement.meta.total_items == 3
    check = accounts.verify_balance(ctx, cash_account.id)
    assert check.matches
    assert check.running_balance_consistent
    assert check.computed_balance == Decimal("575.50")


@pytest.mark.parametrize(
    "debit,credit",
    [
        (Decimal("0"), Decimal("0")),
        (Decimal("10"), Decimal("10")),
        (Decimal("-5"), Decimal("0")),
    ],
)
def test_posting_requires_exactly_one_positive_side(ledger, ctx, cash_account, debit, credit):
    with pytest.raises(InvalidAmountError):
        ledger.post(ctx, cash_account.id, ReferenceType.ADJUSTMENT, None, debit=debit, credit=credit)


def test_posting_to_unknown_account_fails(ledger, ctx, seed):
    with pytest.raises(AccountNotFoundError):
        ledger.post(ctx, 999, ReferenceType.FEE, 1, credit=Decimal("10.00"))


def test_account_of_another_gym_is_not_found(ledger, other_ctx, cash_account):
    with pytest.raises(AccountNotFoundError):
        ledger.post(other_ctx, cash_account.id, ReferenceType.FEE, 1, credit=Decimal("10.00"))


def test_inactive_account_rejects_postings_but_accepts_reversals(ledger, accounts, ctx, bank_account):
    entry = ledger.post(ctx, bank_account.id, ReferenceType.FEE, 1, credit=Decimal("300.00"))
    accounts.deactivate_account(ctx, bank_account.id)

    with pytest.raises(AccountInactiveError):
        ledger.post(ctx, bank_account.id, ReferenceType.FEE, 2, credit=Decimal("1.00"))

    reversal = ledger.reverse(ctx, entry.id)
    assert reversal.debit == Decimal("300.00")
    assert accounts.get_account(ctx, bank_account.id).current_balance == Decimal("10000.00")


def test_backdated_posting_is_rejected(ledger, ctx, cash_account):
    ledger.post(ctx, cash_account.id, ReferenceType.FEE, 1, credit=Decimal("10.00"))

    with pytest.raises(InvalidPostingDateError):
        ledger.post(
            ctx,
            cash_account.id,
            ReferenceType.FEE,
            2,
            credit=Decimal("10.00"),
            transaction_date=date(2024, 3, 1),
        )


def test_reversal_restores_balance_and_keeps_history(ledger, accounts, ctx, cash_account):
    original = ledger.post(ctx, cash_account.id, ReferenceType.FEE, 42, credit=Decimal("200.00"))

    reversal = ledger.reverse(ctx, original.id)

    assert reversal.reverses_entry_id == original.id
    assert reversal.reference_type is ReferenceType.FEE
    assert reversal.reference_id == 42
    assert reversal.debit == Decimal("200.00")
    assert reversal.credit == Decimal("0.00")
    assert reversal.balance == Decimal("500.00")

    statement = ledger.ledger_for(ctx, cash_account.id)
    assert [e.id for e in statement.items] == [original.id, reversal.id]
    assert accounts.verify_balance(ctx, cash_account.id).matches


def test_entry_can_only_be_reversed_once(ledger, ctx, cash_account):
    original = ledger.post(ctx, cash_account.id, ReferenceType.FEE, 1, credit=Decimal("20.00"))
    ledger.reverse(ctx, original.id)

    with pytest.raises(EntryAlreadyReversedError):
        ledger.reverse(ctx, original.id)


def test_reversal_is_never_dated_before_the_latest_entry(ledger, ctx, cash_account, clock):
    first = ledger.post(ctx, cash_account.id, ReferenceType.FEE, 1, credit=Decimal("20.00"))
    clock.advance(days=5)
    ledger.post(ctx, cash_account.id, ReferenceType.FEE, 2, credit=Decimal("5.00"))
    # Gym clock moved back, e.g. after a timezone change
    clock.advance(days=-5)

    reversal = ledger.reverse(ctx, first.id)

    assert reversal.transaction_date == date(2024, 3, 20)


def test_future_dated_posting_is_rejected(ledger, accounts, ctx, cash_account):
    with pytest.raises(InvalidPostingDateError) as exc_info:
        ledger.post(
            ctx,
            cash_account.id,
            ReferenceType.FEE,
            1,
            credit=Decimal("10.00"),
            transaction_date=date(2024, 3, 16),
        )

    assert exc_info.value.field == "transaction_date"
    assert ledger.ledger_for(ctx, cash_account.id).meta.total_items == 0
    assert accounts.get_account(ctx, cash_account.id).current_balance == Decimal("500.00")


def test_posting_dated_today_is_accepted(ledger, ctx, cash_account):
    entry = ledger.post(
        ctx,
        cash_account.id,
        ReferenceType.FEE,
        1,
        credit=Decimal("10.00"),
        transaction_date=date(2024, 3, 15),
    )

    assert entry.transaction_date == date(2024, 3, 15)


def test_reverse_unknown_entry(ledger, ctx, cash_account):
    with pytest.raises(LedgerEntryNotFoundError):
        ledger.reverse(ctx, 12345)


def test_statement_filters_and_pagination(ledger, ctx, cash_account, clock):
    ledger.post(ctx, cash_account.id, ReferenceType.FEE, 1, credit=Decimal("10.00"))
    ledger.post(ctx, cash_account.id, ReferenceType.EXPENSE, 2, debit=Decimal("3.00"))
    clock.advance(days=10)
    ledger.post(ctx, cash_account.id, ReferenceType.FEE, 3, credit=Decimal("7.00"))

    fees = ledger.ledger_for(ctx, cash_account.id, reference_types=[ReferenceType.FEE])
    assert [e.reference_id for e in fees.items] == [1, 3]

    march_15 = ledger.ledger_for(ctx, cash_account.id, start=date(2024, 3, 15), end=date(2024, 3, 15))
    assert [e.reference_id for e in march_15.items] == [1, 2]

    page = ledger.ledger_for(ctx, cash_account.id, page=2, page_size=2)
    assert [e.reference_id for e in page.items] == [3]
    assert page.meta.total_pages == 2
    assert page.meta.has_previous


def test_verify_balance_reports_drift_without_repairing(ledger, accounts, ctx, cash_account, session_factory):
    ledger.post(ctx, cash_account.id, ReferenceType.FEE, 1, credit=Decimal("100.00"))
    session = session_factory()
    try:
        session.get(Account, cash_account.id).current_balance = Decimal("999.00")
        session.commit()
    finally:
        session.close()

    check = accounts.verify_balance(ctx, cash_account.id)

    assert not check.matches
    assert check.cached_balance == Decimal("999.00")
    assert check.computed_balance == Decimal("600.00")
    assert accounts.get_account(ctx, cash_account.id).current_balance == Decimal("999.00")


def test_entry_is_one_sided_in_storage(ledger, ctx, cash_account, session_factory):
    entry = ledger.post(ctx, cash_account.id, ReferenceType.FEE, 1, credit=Decimal("12.00"))
    session = session_factory()
    try:
        stored = session.get(AccountLedgerEntry, entry.id)
        assert stored.net_amount == Decimal("12.00")
        assert not stored.is_reversal
    finally:
        session.close()

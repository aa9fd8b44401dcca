from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from gym_billing.models import PaymentStatus, ReferenceType
from gym_billing.repositories.payroll import SalarySlipRepository
from gym_billing.services.common.errors import (
    AccountInactiveError,
    AlreadyPaidError,
    InvalidAmountError,
    InvalidPeriodError,
    NoSalaryConfigError,
    NotPaidError,
    SalaryConfigNotFoundError,
    SalarySlipNotFoundError,
    SlipAlreadyExistsError,
    TrainerNotFoundError,
)
from gym_billing.utils.datetime_utils import DateRangeHelper


@pytest.fixture
def trained_members(subscriptions, ctx, seed):
    """March enrolments under the first trainer: two distinct members, one cancelled."""

    def enrol(member_id, start, trainer_id=seed.trainer_id):
        return subscriptions.create_subscription(
            ctx,
            member_id=member_id,
            package_id=seed.package_id,
            start_date=start,
            price_paid=Decimal("1500"),
            trainer_id=trainer_id,
            trainer_addon_price=Decimal("500"),
        )

    enrol(seed.member_id, date(2024, 3, 15))
    enrol(seed.member_id, date(2024, 3, 1))
    enrol(seed.member2_id, date(2024, 2, 20))
    dropped = enrol(seed.member3_id, date(2024, 3, 5))
    subscriptions.cancel_subscription(ctx, dropped.subscription.id, cancel_invoice=True)
    # Ended before March
    enrol(seed.member3_id, date(2024, 1, 1))


@pytest.fixture
def trainer_config(salary_configs, ctx, seed):
    return salary_configs.set_config(
        ctx,
        seed.trainer_id,
        base_salary=Decimal("5000"),
        per_member_incentive=Decimal("250"),
        effective_from=date(2024, 1, 1),
    )


# --- configs ---------------------------------------------------------------------


def test_new_terms_supersede_from_their_effective_date(salary_configs, ctx, seed, trainer_config):
    raise_ = salary_configs.set_config(
        ctx,
        seed.trainer_id,
        base_salary=Decimal("6000"),
        per_member_incentive=Decimal("300"),
        effective_from=date(2024, 4, 1),
    )

    assert salary_configs.get_active_config(ctx, seed.trainer_id).id == trainer_config.id
    assert salary_configs.get_active_config(ctx, seed.trainer_id, date(2024, 3, 31)).id == trainer_config.id
    assert salary_configs.get_active_config(ctx, seed.trainer_id, date(2024, 4, 1)).id == raise_.id
    assert [c.id for c in salary_configs.config_history(ctx, seed.trainer_id)] == [
        raise_.id,
        trainer_config.id,
    ]


def test_same_effective_date_replaces_active_config(salary_configs, ctx, seed, trainer_config):
    corrected = salary_configs.set_config(
        ctx,
        seed.trainer_id,
        base_salary=Decimal("5200"),
        per_member_incentive=Decimal("250"),
        effective_from=date(2024, 1, 1),
    )

    active = salary_configs.get_active_config(ctx, seed.trainer_id, date(2024, 2, 1))
    assert active.id == corrected.id
    assert active.base_salary == Decimal("5200.00")

    history = {c.id: c.is_active for c in salary_configs.config_history(ctx, seed.trainer_id)}
    assert history == {trainer_config.id: False, corrected.id: True}


def test_no_config_before_first_effective_date(salary_configs, ctx, seed, trainer_config):
    with pytest.raises(SalaryConfigNotFoundError):
        salary_configs.get_active_config(ctx, seed.trainer_id, date(2023, 12, 31))


def test_deactivated_config_is_not_in_force(salary_configs, ctx, seed, trainer_config):
    salary_configs.deactivate_config(ctx, trainer_config.id)

    with pytest.raises(SalaryConfigNotFoundError):
        salary_configs.get_active_config(ctx, seed.trainer_id)


def test_config_validation(salary_configs, ctx, seed):
    with pytest.raises(InvalidAmountError):
        salary_configs.set_config(
            ctx,
            seed.trainer_id,
            base_salary=Decimal("-1"),
            per_member_incentive=Decimal("0"),
            effective_from=date(2024, 1, 1),
        )
    with pytest.raises(TrainerNotFoundError):
        salary_configs.set_config(
            ctx,
            999,
            base_salary=Decimal("1000"),
            per_member_incentive=Decimal("0"),
            effective_from=date(2024, 1, 1),
        )


# --- active members --------------------------------------------------------------


def test_active_member_count_is_distinct_and_excludes_cancelled(salary_slips, ctx, seed, trained_members):
    march = salary_slips.get_active_member_count(ctx, seed.trainer_id, 3, 2024)
    january = salary_slips.get_active_member_count(ctx, seed.trainer_id, 1, 2024)

    assert march.active_member_count == 2
    # Only member3's January enrolment
    assert january.active_member_count == 1
    assert salary_slips.get_active_member_count(ctx, seed.trainer2_id, 3, 2024).active_member_count == 0


def test_expired_subscriptions_still_count(salary_slips, subscriptions, ctx, seed, trained_members):
    history = subscriptions.subscription_history(ctx, seed.member2_id)
    subscriptions.renew_subscription(
        ctx, history[0].id, package_id=seed.basic_package_id, price_paid=Decimal("1000")
    )

    assert salary_slips.get_active_member_count(ctx, seed.trainer_id, 3, 2024).active_member_count == 2


def test_active_member_count_validation(salary_slips, ctx, seed):
    with pytest.raises(InvalidPeriodError):
        salary_slips.get_active_member_count(ctx, seed.trainer_id, 0, 2024)
    with pytest.raises(TrainerNotFoundError):
        salary_slips.get_active_member_count(ctx, 999, 3, 2024)


# --- generation ------------------------------------------------------------------


def test_generate_snapshots_config_and_members(salary_slips, ctx, seed, trainer_config, trained_members):
    slip = salary_slips.generate_salary_slip(ctx, seed.trainer_id, 3, 2024)

    assert slip.base_salary == Decimal("5000.00")
    assert slip.active_member_count == 2
    assert slip.per_member_incentive == Decimal("250.00")
    assert slip.incentive_total == Decimal("500.00")
    assert slip.gross_salary == Decimal("5500.00")
    assert slip.payment_status is PaymentStatus.UNPAID
    assert slip.paid_at is None


def test_config_in_force_at_month_end_is_used(salary_slips, salary_configs, ctx, seed, trainer_config):
    salary_configs.set_config(
        ctx,
        seed.trainer_id,
        base_salary=Decimal("7000"),
        per_member_incentive=Decimal("0"),
        effective_from=date(2024, 3, 20),
    )

    march = salary_slips.generate_salary_slip(ctx, seed.trainer_id, 3, 2024)
    february = salary_slips.generate_salary_slip(ctx, seed.trainer_id, 2, 2024)

    assert march.base_salary == Decimal("7000.00")
    assert february.base_salary == Decimal("5000.00")


def test_existing_slip_is_never_overwritten(salary_slips, salary_configs, ctx, seed, trainer_config):
    first = salary_slips.generate_salary_slip(ctx, seed.trainer_id, 3, 2024)
    salary_configs.set_config(
        ctx,
        seed.trainer_id,
        base_salary=Decimal("9000"),
        per_member_incentive=Decimal("0"),
        effective_from=date(2024, 3, 1),
    )

    with pytest.raises(SlipAlreadyExistsError):
        salary_slips.generate_salary_slip(ctx, seed.trainer_id, 3, 2024)

    assert salary_slips.get_slip(ctx, first.id).base_salary == Decimal("5000.00")


def test_concurrent_generation_loses_on_unique_constraint(salary_slips, ctx, seed, trainer_config, monkeypatch):
    # Both generations pass the early check, as two concurrent requests would
    monkeypatch.setattr(SalarySlipRepository, "exists_for_period", lambda self, *args, **kwargs: False)
    salary_slips.generate_salary_slip(ctx, seed.trainer_id, 3, 2024)

    with pytest.raises(SlipAlreadyExistsError) as exc_info:
        salary_slips.generate_salary_slip(ctx, seed.trainer_id, 3, 2024)

    assert isinstance(exc_info.value.__cause__, IntegrityError)
    assert salary_slips.list_slips(ctx, trainer_id=seed.trainer_id).meta.total_items == 1


def test_other_storage_failures_are_not_reported_as_duplicates(
    salary_slips, ctx, seed, trainer_config, monkeypatch
):
    # Skip the period check so month 13 reaches the table's check constraint
    monkeypatch.setattr(
        DateRangeHelper,
        "get_month_range",
        staticmethod(lambda year, month: (date(2024, 12, 1), date(2024, 12, 31))),
    )

    with pytest.raises(IntegrityError):
        with salary_slips.unit_of_work() as uow:
            salary_slips.generate_salary_slip_in(uow, ctx, seed.trainer_id, 13, 2024)

    assert salary_slips.list_slips(ctx).meta.total_items == 0


def test_generate_without_config(salary_slips, ctx, seed):
    with pytest.raises(NoSalaryConfigError) as exc_info:
        salary_slips.generate_salary_slip(ctx, seed.trainer_id, 3, 2024)

    assert exc_info.value.details["trainer_id"] == seed.trainer_id
    assert salary_slips.list_slips(ctx).meta.total_items == 0


@pytest.mark.parametrize("month, year", [(13, 2024), (0, 2024), (6, 1999)])
def test_generate_invalid_period(salary_slips, ctx, seed, trainer_config, month, year):
    with pytest.raises(InvalidPeriodError):
        salary_slips.generate_salary_slip(ctx, seed.trainer_id, month, year)


def test_generate_for_all_reports_skips(salary_slips, ctx, seed, trainer_config):
    first = salary_slips.generate_for_all(ctx, 3, 2024)

    assert [s.trainer_id for s in first.generated] == [seed.trainer_id]
    assert first.skipped_no_config == [seed.trainer2_id]
    assert first.skipped_existing == []

    second = salary_slips.generate_for_all(ctx, 3, 2024)

    assert second.generated == []
    assert second.skipped_existing == [seed.trainer_id]
    assert second.skipped_no_config == [seed.trainer2_id]


# --- payment ---------------------------------------------------------------------


def test_mark_paid_debits_account(salary_slips, accounts, ledger, ctx, seed, trainer_config, trained_members, bank_account):
    slip = salary_slips.generate_salary_slip(ctx, seed.trainer_id, 3, 2024)

    paid = salary_slips.mark_as_paid(ctx, slip.id, bank_account.id)

    assert paid.payment_status is PaymentStatus.PAID
    assert paid.paid_at is not None
    assert paid.paid_account_id == bank_account.id
    entry = ledger.get_entry(ctx, paid.ledger_entry_id)
    assert entry.reference_type is ReferenceType.SALARY_PAYMENT
    assert entry.reference_id == slip.id
    assert entry.debit == Decimal("5500.00")
    assert accounts.get_account(ctx, bank_account.id).current_balance == Decimal("4500.00")

    with pytest.raises(AlreadyPaidError):
        salary_slips.mark_as_paid(ctx, slip.id, bank_account.id)


def test_mark_unpaid_reverses_debit(salary_slips, accounts, ctx, seed, trainer_config, bank_account):
    slip = salary_slips.generate_salary_slip(ctx, seed.trainer_id, 3, 2024)
    salary_slips.mark_as_paid(ctx, slip.id, bank_account.id)

    unpaid = salary_slips.mark_as_unpaid(ctx, slip.id)

    assert unpaid.payment_status is PaymentStatus.UNPAID
    assert unpaid.paid_at is None
    assert unpaid.paid_account_id is None
    assert unpaid.ledger_entry_id is None
    assert accounts.get_account(ctx, bank_account.id).current_balance == Decimal("10000.00")
    assert accounts.verify_balance(ctx, bank_account.id).matches

    with pytest.raises(NotPaidError):
        salary_slips.mark_as_unpaid(ctx, slip.id)

    # Pay again after undoing
    again = salary_slips.mark_as_paid(ctx, slip.id, bank_account.id)
    assert again.payment_status is PaymentStatus.PAID


def test_zero_gross_slip_paid_without_posting(salary_slips, salary_configs, ledger, ctx, seed, bank_account):
    salary_configs.set_config(
        ctx,
        seed.trainer2_id,
        base_salary=Decimal("0"),
        per_member_incentive=Decimal("100"),
        effective_from=date(2024, 1, 1),
    )
    slip = salary_slips.generate_salary_slip(ctx, seed.trainer2_id, 3, 2024)
    assert slip.gross_salary == Decimal("0.00")

    paid = salary_slips.mark_as_paid(ctx, slip.id, bank_account.id)

    assert paid.payment_status is PaymentStatus.PAID
    assert paid.ledger_entry_id is None
    assert ledger.ledger_for(ctx, bank_account.id).meta.total_items == 0
    assert salary_slips.mark_as_unpaid(ctx, slip.id).payment_status is PaymentStatus.UNPAID


def test_failed_payment_leaves_slip_unpaid(salary_slips, accounts, ctx, seed, trainer_config, bank_account):
    slip = salary_slips.generate_salary_slip(ctx, seed.trainer_id, 3, 2024)
    accounts.deactivate_account(ctx, bank_account.id)

    with pytest.raises(AccountInactiveError):
        salary_slips.mark_as_paid(ctx, slip.id, bank_account.id)

    assert salary_slips.get_slip(ctx, slip.id).payment_status is PaymentStatus.UNPAID


def test_listing_and_summary(salary_slips, salary_configs, ctx, seed, trainer_config, trained_members, bank_account):
    salary_configs.set_config(
        ctx,
        seed.trainer2_id,
        base_salary=Decimal("3000"),
        per_member_incentive=Decimal("0"),
        effective_from=date(2024, 1, 1),
    )
    salary_slips.generate_for_all(ctx, 3, 2024)
    feb = salary_slips.generate_salary_slip(ctx, seed.trainer_id, 2, 2024)
    salary_slips.mark_as_paid(ctx, feb.id, bank_account.id)

    march = salary_slips.slip_summary(ctx, month=3, year=2024)
    assert march.slip_count == 2
    assert march.total_base_salary == Decimal("8000.00")
    assert march.total_incentives == Decimal("500.00")
    assert march.total_salary_payout == Decimal("8500.00")

    paid = salary_slips.slip_summary(ctx, payment_status=PaymentStatus.PAID)
    assert paid.slip_count == 1
    assert paid.total_salary_payout == feb.gross_salary

    listed = salary_slips.list_slips(ctx, trainer_id=seed.trainer_id)
    assert [(s.month, s.year) for s in listed.items] == [(3, 2024), (2, 2024)]
    unpaid = salary_slips.list_slips(ctx, payment_status=PaymentStatus.UNPAID)
    assert unpaid.meta.total_items == 2


def test_unknown_slip(salary_slips, ctx, seed):
    with pytest.raises(SalarySlipNotFoundError):
        salary_slips.get_slip(ctx, 77)
    with pytest.raises(SalarySlipNotFoundError):
        salary_slips.mark_as_paid(ctx, 77, 1)

from datetime import date
from decimal import Decimal

import pytest

from gym_billing.models import InvoiceStatus, SubscriptionStatus
from gym_billing.services.common.errors import (
    InvalidAmountError,
    InvoiceHasPaymentsError,
    MemberNotFoundError,
    PackageInactiveError,
    PackageNotFoundError,
    SubscriptionClosedError,
    SubscriptionNotFoundError,
    TrainerAddonNotAllowedError,
    TrainerNotFoundError,
)
from gym_billing.services.membership.subscription_service import default_renewal_start


class TestDefaultRenewalStart:
    def test_future_end_date_is_kept(self):
        assert default_renewal_start(date(2024, 4, 14), date(2024, 3, 15)) == date(2024, 4, 14)

    def test_lapsed_subscription_starts_tomorrow(self):
        assert default_renewal_start(date(2024, 3, 1), date(2024, 3, 15)) == date(2024, 3, 16)

    def test_ending_today_starts_tomorrow(self):
        assert default_renewal_start(date(2024, 3, 15), date(2024, 3, 15)) == date(2024, 3, 16)


def test_create_writes_subscription_and_invoice(subscriptions, ctx, seed):
    created = subscriptions.create_subscription(
        ctx,
        member_id=seed.member_id,
        package_id=seed.package_id,
        start_date=date(2024, 3, 15),
        price_paid=Decimal("1500"),
        trainer_id=seed.trainer_id,
        trainer_addon_price=Decimal("500"),
        notes="Morning batch",
    )

    sub = created.subscription
    assert sub.status is SubscriptionStatus.ACTIVE
    assert sub.end_date == date(2024, 4, 14)
    assert sub.trainer_addon_price == Decimal("500.00")
    assert sub.renewed_from_id is None

    invoice = created.invoice
    assert invoice.subscription_id == sub.id
    assert invoice.member_id == seed.member_id
    assert invoice.amount == Decimal("1500.00")
    assert invoice.discount == Decimal("0.00")
    assert invoice.status is InvoiceStatus.UNPAID


def test_inactive_package_rejected(subscriptions, ctx, seed):
    with pytest.raises(PackageInactiveError):
        subscriptions.create_subscription(
            ctx,
            member_id=seed.member_id,
            package_id=seed.retired_package_id,
            start_date=date(2024, 3, 15),
            price_paid=Decimal("2500"),
        )


def test_trainer_on_package_without_addon_rejected(subscriptions, ctx, seed):
    with pytest.raises(TrainerAddonNotAllowedError):
        subscriptions.create_subscription(
            ctx,
            member_id=seed.member_id,
            package_id=seed.basic_package_id,
            start_date=date(2024, 3, 15),
            price_paid=Decimal("1000"),
            trainer_id=seed.trainer_id,
        )


def test_addon_price_requires_trainer(subscriptions, ctx, seed):
    with pytest.raises(InvalidAmountError):
        subscriptions.create_subscription(
            ctx,
            member_id=seed.member_id,
            package_id=seed.package_id,
            start_date=date(2024, 3, 15),
            price_paid=Decimal("1500"),
            trainer_addon_price=Decimal("500"),
        )


def test_negative_price_rejected(subscriptions, ctx, seed):
    with pytest.raises(InvalidAmountError):
        subscriptions.create_subscription(
            ctx,
            member_id=seed.member_id,
            package_id=seed.basic_package_id,
            start_date=date(2024, 3, 15),
            price_paid=Decimal("-1"),
        )


@pytest.mark.parametrize(
    "overrides, error",
    [
        ({"member_id": 999}, MemberNotFoundError),
        ({"package_id": 999}, PackageNotFoundError),
        ({"trainer_id": 999}, TrainerNotFoundError),
    ],
)
def test_unknown_references_rejected(subscriptions, ctx, seed, overrides, error):
    kwargs = dict(
        member_id=seed.member_id,
        package_id=seed.package_id,
        start_date=date(2024, 3, 15),
        price_paid=Decimal("1500"),
    )
    kwargs.update(overrides)

    with pytest.raises(error):
        subscriptions.create_subscription(ctx, **kwargs)


def test_member_of_another_gym_rejected(subscriptions, ctx, seed):
    with pytest.raises(MemberNotFoundError):
        subscriptions.create_subscription(
            ctx,
            member_id=seed.foreign_member_id,
            package_id=seed.basic_package_id,
            start_date=date(2024, 3, 15),
            price_paid=Decimal("1000"),
        )


def test_invoice_failure_rolls_back_subscription(subscriptions, ctx, seed, monkeypatch):
    def fail(*args, **kwargs):
        raise RuntimeError("invoice store unavailable")

    monkeypatch.setattr(subscriptions.invoices, "create_invoice_in", fail)

    with pytest.raises(RuntimeError):
        subscriptions.create_subscription(
            ctx,
            member_id=seed.member_id,
            package_id=seed.basic_package_id,
            start_date=date(2024, 3, 15),
            price_paid=Decimal("1000"),
        )

    assert subscriptions.list_subscriptions(ctx).meta.total_items == 0


def test_renew_defaults_start_to_old_end_date(subscriptions, invoices, ctx, subscription, seed):
    old_id = subscription.subscription.id

    renewed = subscriptions.renew_subscription(
        ctx, old_id, package_id=seed.basic_package_id, price_paid=Decimal("900")
    )

    assert renewed.subscription.start_date == date(2024, 4, 14)
    assert renewed.subscription.end_date == date(2024, 5, 14)
    assert renewed.subscription.renewed_from_id == old_id
    assert renewed.subscription.member_id == seed.member_id
    assert renewed.invoice.amount == Decimal("900.00")
    assert renewed.invoice.invoice_number == "INV-20240315-0002"
    assert subscriptions.get_subscription(ctx, old_id).status is SubscriptionStatus.EXPIRED
    assert invoices.get_invoice(ctx, subscription.invoice.id).status is InvoiceStatus.UNPAID


def test_renew_lapsed_subscription_starts_tomorrow(subscriptions, ctx, subscription, seed, clock):
    clock.advance(days=60)

    renewed = subscriptions.renew_subscription(
        ctx, subscription.subscription.id, package_id=seed.basic_package_id, price_paid=Decimal("1000")
    )

    assert renewed.subscription.start_date == date(2024, 5, 15)


def test_renew_with_explicit_start_and_trainer(subscriptions, ctx, subscription, seed):
    renewed = subscriptions.renew_subscription(
        ctx,
        subscription.subscription.id,
        package_id=seed.package_id,
        price_paid=Decimal("2000"),
        start_date=date(2024, 4, 1),
        trainer_id=seed.trainer_id,
        trainer_addon_price=Decimal("500"),
    )

    assert renewed.subscription.start_date == date(2024, 4, 1)
    assert renewed.subscription.trainer_id == seed.trainer_id


def test_cancelled_subscription_cannot_be_renewed(subscriptions, ctx, subscription, seed):
    subscriptions.cancel_subscription(ctx, subscription.subscription.id)

    with pytest.raises(SubscriptionClosedError):
        subscriptions.renew_subscription(
            ctx, subscription.subscription.id, package_id=seed.basic_package_id, price_paid=Decimal("1000")
        )


def test_failed_renewal_leaves_old_subscription_active(subscriptions, ctx, subscription, seed):
    with pytest.raises(PackageInactiveError):
        subscriptions.renew_subscription(
            ctx, subscription.subscription.id, package_id=seed.retired_package_id, price_paid=Decimal("1000")
        )

    assert subscriptions.get_subscription(ctx, subscription.subscription.id).status is SubscriptionStatus.ACTIVE
    assert subscriptions.list_subscriptions(ctx).meta.total_items == 1


def test_renewal_invoice_failure_rolls_back_new_subscription(
    subscriptions, invoices, ctx, subscription, seed, monkeypatch
):
    flushed_ids = []

    def fail(uow, ctx, member_id, subscription_id, amount, **kwargs):
        flushed_ids.append(subscription_id)
        raise RuntimeError("invoice store unavailable")

    monkeypatch.setattr(subscriptions.invoices, "create_invoice_in", fail)

    with pytest.raises(RuntimeError):
        subscriptions.renew_subscription(
            ctx, subscription.subscription.id, package_id=seed.basic_package_id, price_paid=Decimal("1000")
        )

    # The new subscription had been written before the invoice step failed
    assert len(flushed_ids) == 1 and flushed_ids[0] is not None
    assert subscriptions.get_subscription(ctx, subscription.subscription.id).status is SubscriptionStatus.ACTIVE
    assert subscriptions.list_subscriptions(ctx).meta.total_items == 1
    with pytest.raises(SubscriptionNotFoundError):
        subscriptions.get_subscription(ctx, flushed_ids[0])
    assert invoices.list_invoices(ctx).meta.total_items == 1


def test_active_subscription_follows_renewal(subscriptions, ctx, subscription, seed):
    assert subscriptions.get_active_subscription(ctx, seed.member_id).id == subscription.subscription.id

    renewed = subscriptions.renew_subscription(
        ctx, subscription.subscription.id, package_id=seed.basic_package_id, price_paid=Decimal("1000")
    )

    assert subscriptions.get_active_subscription(ctx, seed.member_id).id == renewed.subscription.id


def test_no_active_subscription(subscriptions, ctx, subscription, seed):
    assert subscriptions.get_active_subscription(ctx, seed.member2_id) is None

    subscriptions.cancel_subscription(ctx, subscription.subscription.id)

    assert subscriptions.get_active_subscription(ctx, seed.member_id) is None


def test_active_subscription_of_unknown_member(subscriptions, ctx, seed):
    with pytest.raises(MemberNotFoundError):
        subscriptions.get_active_subscription(ctx, seed.foreign_member_id)


def test_cancel_with_invoice(subscriptions, invoices, ctx, subscription):
    cancelled = subscriptions.cancel_subscription(ctx, subscription.subscription.id, cancel_invoice=True)

    assert cancelled.status is SubscriptionStatus.CANCELLED
    assert invoices.get_invoice(ctx, subscription.invoice.id).status is InvoiceStatus.CANCELLED


def test_cancel_keeps_invoice_by_default(subscriptions, invoices, ctx, subscription):
    subscriptions.cancel_subscription(ctx, subscription.subscription.id)

    assert invoices.get_invoice(ctx, subscription.invoice.id).status is InvoiceStatus.UNPAID


def test_cancel_with_paid_invoice_rolls_back(subscriptions, payments, ctx, subscription, cash_account):
    payments.record_payment(ctx, subscription.invoice.id, cash_account.id, Decimal("100.00"))

    with pytest.raises(InvoiceHasPaymentsError):
        subscriptions.cancel_subscription(ctx, subscription.subscription.id, cancel_invoice=True)

    assert subscriptions.get_subscription(ctx, subscription.subscription.id).status is SubscriptionStatus.ACTIVE


def test_cancel_is_terminal(subscriptions, ctx, subscription):
    subscriptions.cancel_subscription(ctx, subscription.subscription.id)

    with pytest.raises(SubscriptionClosedError):
        subscriptions.cancel_subscription(ctx, subscription.subscription.id)


def test_history_and_listing(subscriptions, ctx, other_ctx, subscription, seed):
    renewed = subscriptions.renew_subscription(
        ctx, subscription.subscription.id, package_id=seed.basic_package_id, price_paid=Decimal("1000")
    )
    subscriptions.create_subscription(
        ctx,
        member_id=seed.member2_id,
        package_id=seed.package_id,
        start_date=date(2024, 3, 10),
        price_paid=Decimal("1500"),
        trainer_id=seed.trainer_id,
    )

    history = subscriptions.subscription_history(ctx, seed.member_id)
    assert [s.id for s in history] == [subscription.subscription.id, renewed.subscription.id]
    assert [s.status for s in history] == [SubscriptionStatus.EXPIRED, SubscriptionStatus.ACTIVE]

    assert subscriptions.list_subscriptions(ctx).meta.total_items == 3
    active = subscriptions.list_subscriptions(ctx, status=SubscriptionStatus.ACTIVE)
    assert active.meta.total_items == 2
    trained = subscriptions.list_subscriptions(ctx, trainer_id=seed.trainer_id)
    assert [s.member_id for s in trained.items] == [seed.member2_id]
    assert subscriptions.list_subscriptions(other_ctx).meta.total_items == 0


def test_unknown_subscription(subscriptions, ctx, seed):
    with pytest.raises(SubscriptionNotFoundError):
        subscriptions.get_subscription(ctx, 42)
    with pytest.raises(MemberNotFoundError):
        subscriptions.subscription_history(ctx, 999)

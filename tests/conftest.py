from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
import pytz
from sqlalchemy.pool import StaticPool

from gym_billing.db.init_db import drop_db, init_db
from gym_billing.db.session import build_engine, build_session_factory
from gym_billing.models import AccountType, Member, Package, Trainer
from gym_billing.schemas.gym.context import GymContext, GymSettings
from gym_billing.services import (
    AccountService,
    ExpenseCategoryService,
    ExpenseService,
    GymSettingsService,
    InvoiceService,
    LedgerService,
    PaymentService,
    SalaryConfigService,
    SalarySlipService,
    SubscriptionService,
)

GYM_ID = 1
OTHER_GYM_ID = 2


class FrozenClock:
    """Clock returning a fixed aware UTC datetime until moved."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    # SQLite's DROP TABLE deletes rows first; self-referencing RESTRICT rows
    # (reversals, renewals) would block it while foreign keys are enforced.
    with engine.connect() as conn:
        conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def clock():
    return FrozenClock(pytz.UTC.localize(datetime(2024, 3, 15, 9, 0)))


@pytest.fixture
def ctx():
    return GymContext(gym_id=GYM_ID, settings=GymSettings(invoice_overdue_in_days=7, timezone="UTC"))


@pytest.fixture
def other_ctx():
    return GymContext(gym_id=OTHER_GYM_ID, settings=GymSettings(timezone="UTC"))


# --- services --------------------------------------------------------------------


@pytest.fixture
def ledger(session_factory, clock):
    return LedgerService(session_factory, clock)


@pytest.fixture
def accounts(session_factory, clock):
    return AccountService(session_factory, clock)


@pytest.fixture
def expenses(session_factory, clock):
    return ExpenseService(session_factory, clock)


@pytest.fixture
def expense_categories(session_factory, clock):
    return ExpenseCategoryService(session_factory, clock)


@pytest.fixture
def invoices(session_factory, clock):
    return InvoiceService(session_factory, clock)


@pytest.fixture
def payments(session_factory, clock):
    return PaymentService(session_factory, clock)


@pytest.fixture
def subscriptions(session_factory, clock):
    return SubscriptionService(session_factory, clock)


@pytest.fixture
def salary_configs(session_factory, clock):
    return SalaryConfigService(session_factory, clock)


@pytest.fixture
def salary_slips(session_factory, clock):
    return SalarySlipService(session_factory, clock)


@pytest.fixture
def gym_settings(session_factory, clock):
    return GymSettingsService(session_factory, clock)


# --- data ------------------------------------------------------------------------


@pytest.fixture
def seed(session_factory):
    """Roster rows owned by other parts of the back office."""
    session = session_factory()
    try:
        member = Member(gym_id=GYM_ID, first_name="Asha", last_name="Rao")
        member2 = Member(gym_id=GYM_ID, first_name="Vikram", last_name="Shah")
        member3 = Member(gym_id=GYM_ID, first_name="Neha")
        monthly = Package(
            gym_id=GYM_ID,
            name="Monthly with trainer",
            price=Decimal("1500.00"),
            duration_days=30,
            allows_trainer_addon=True,
            is_active=True,
        )
        basic = Package(
            gym_id=GYM_ID,
            name="Basic monthly",
            price=Decimal("1000.00"),
            duration_days=30,
            allows_trainer_addon=False,
            is_active=True,
        )
        retired = Package(
            gym_id=GYM_ID,
            name="Old quarterly",
            price=Decimal("2500.00"),
            duration_days=90,
            allows_trainer_addon=False,
            is_active=False,
        )
        trainer = Trainer(gym_id=GYM_ID, first_name="Ravi", monthly_addon_price=Decimal("500.00"))
        trainer2 = Trainer(gym_id=GYM_ID, first_name="Meera", monthly_addon_price=Decimal("400.00"))
        foreign_member = Member(gym_id=OTHER_GYM_ID, first_name="Outsider")
        session.add_all([member, member2, member3, monthly, basic, retired, trainer, trainer2, foreign_member])
        session.commit()
        return SimpleNamespace(
            member_id=member.id,
            member2_id=member2.id,
            member3_id=member3.id,
            package_id=monthly.id,
            basic_package_id=basic.id,
            retired_package_id=retired.id,
            trainer_id=trainer.id,
            trainer2_id=trainer2.id,
            foreign_member_id=foreign_member.id,
        )
    finally:
        session.close()


@pytest.fixture
def cash_account(accounts, ctx):
    return accounts.create_account(
        ctx,
        account_name="Front desk cash",
        account_type=AccountType.CASH,
        opening_balance=Decimal("500.00"),
        is_default=True,
    )


@pytest.fixture
def bank_account(accounts, ctx):
    return accounts.create_account(
        ctx,
        account_name="Current account",
        account_type=AccountType.BANK,
        opening_balance=Decimal("10000.00"),
        bank_name="State Bank",
    )


@pytest.fixture
def subscription(subscriptions, ctx, seed):
    """Active basic subscription starting today with an invoice of 1000.00."""
    return subscriptions.create_subscription(
        ctx,
        member_id=seed.member_id,
        package_id=seed.basic_package_id,
        start_date=datetime(2024, 3, 15).date(),
        price_paid=Decimal("1000.00"),
    )


@pytest.fixture
def utilities(expense_categories, ctx):
    return expense_categories.create_category(ctx, "Utilities", description="Power and water")


@pytest.fixture
def rent(expense_categories, ctx):
    return expense_categories.create_category(ctx, "Rent")

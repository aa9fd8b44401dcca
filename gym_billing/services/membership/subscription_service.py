"""
Subscription Service

Creates, renews and cancels subscriptions. A subscription and its invoice
are always written in the same unit of work: neither ever exists without
the other.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from gym_billing.core.constants import ZERO
from gym_billing.core.pagination import normalize_pagination, paginate_items
from gym_billing.models.base import SubscriptionStatus
from gym_billing.models.membership.subscription import Subscription
from gym_billing.repositories.billing import InvoiceRepository
from gym_billing.repositories.membership import (
    MemberRepository,
    PackageRepository,
    SubscriptionRepository,
    TrainerRepository,
)
from gym_billing.schemas.common.pagination import PaginatedResponse
from gym_billing.schemas.gym.context import GymContext
from gym_billing.schemas.membership.subscription import SubscriptionResponse, SubscriptionWithInvoice
from gym_billing.services.base import BaseService
from gym_billing.services.billing.invoice_service import InvoiceService
from gym_billing.services.common.errors import (
    InvalidAmountError,
    MemberNotFoundError,
    PackageInactiveError,
    PackageNotFoundError,
    SubscriptionClosedError,
    SubscriptionNotFoundError,
    TrainerAddonNotAllowedError,
    TrainerNotFoundError,
)
from gym_billing.services.common.mapping import to_schema, to_schema_list
from gym_billing.services.common.unit_of_work import UnitOfWork
from gym_billing.services.common.validators import money


def default_renewal_start(old_end_date: date, today: date) -> date:
    """Renewals start when the old period ends, but never before tomorrow."""
    tomorrow = today + timedelta(days=1)
    return old_end_date if old_end_date > tomorrow else tomorrow


class SubscriptionService(BaseService):
    """Subscription lifecycle."""

    def __init__(self, session_factory, clock=None):
        super().__init__(session_factory, clock)
        self.invoices = InvoiceService(session_factory, clock)

    # ==================== Creation ====================

    def create_subscription(
        self,
        ctx: GymContext,
        member_id: int,
        package_id: int,
        start_date: date,
        price_paid: Decimal,
        trainer_id: Optional[int] = None,
        trainer_addon_price: Decimal = ZERO,
        notes: Optional[str] = None,
    ) -> SubscriptionWithInvoice:
        """
        Enrol a member in a package and invoice ``price_paid``.

        ``end_date = start_date + package.duration_days``. The invoice has no
        discount; callers apply any discount to ``price_paid`` beforehand.

        Raises:
            InvalidAmountError: Negative prices or an add-on price without a trainer
            MemberNotFoundError / PackageNotFoundError / TrainerNotFoundError
            PackageInactiveError: The package is no longer sold
            TrainerAddonNotAllowedError: A trainer was given for a package without add-on
        """
        price_paid, trainer_addon_price = self._validate_prices(price_paid, trainer_addon_price, trainer_id)
        with self._operation("subscription.create", gym_id=ctx.gym_id, member_id=member_id):
            with self.unit_of_work() as uow:
                subscription = self.create_subscription_in(
                    uow,
                    ctx,
                    member_id=member_id,
                    package_id=package_id,
                    start_date=start_date,
                    price_paid=price_paid,
                    trainer_id=trainer_id,
                    trainer_addon_price=trainer_addon_price,
                    notes=notes,
                )
                invoice = self.invoices.create_invoice_in(
                    uow,
                    ctx,
                    member_id=member_id,
                    subscription_id=subscription.id,
                    amount=price_paid,
                )
                self._logger.info(
                    "subscription.created",
                    gym_id=ctx.gym_id,
                    subscription_id=subscription.id,
                    member_id=member_id,
                    package_id=package_id,
                    trainer_id=trainer_id,
                    start_date=subscription.start_date.isoformat(),
                    end_date=subscription.end_date.isoformat(),
                    invoice_id=invoice.id,
                )
                return SubscriptionWithInvoice(
                    subscription=to_schema(subscription, SubscriptionResponse),
                    invoice=self.invoices.to_response(uow, ctx, invoice),
                )

    def create_subscription_in(
        self,
        uow: UnitOfWork,
        ctx: GymContext,
        member_id: int,
        package_id: int,
        start_date: date,
        price_paid: Decimal,
        trainer_id: Optional[int] = None,
        trainer_addon_price: Decimal = ZERO,
        notes: Optional[str] = None,
        renewed_from_id: Optional[int] = None,
    ) -> Subscription:
        """Validate references and insert an Active subscription."""
        if uow.get_repo(MemberRepository).find_in_gym(ctx.gym_id, member_id) is None:
            raise MemberNotFoundError(member_id)

        package = uow.get_repo(PackageRepository).find_in_gym(ctx.gym_id, package_id)
        if package is None:
            raise PackageNotFoundError(package_id)
        if not package.is_active:
            raise PackageInactiveError(package_id)

        if trainer_id is not None:
            if uow.get_repo(TrainerRepository).find_in_gym(ctx.gym_id, trainer_id) is None:
                raise TrainerNotFoundError(trainer_id)
            if not package.allows_trainer_addon:
                raise TrainerAddonNotAllowedError(package_id)

        return uow.get_repo(SubscriptionRepository).add(
            Subscription(
                gym_id=ctx.gym_id,
                member_id=member_id,
                package_id=package.id,
                trainer_id=trainer_id,
                start_date=start_date,
                end_date=start_date + timedelta(days=package.duration_days),
                price_paid=price_paid,
                trainer_addon_price=trainer_addon_price,
                status=SubscriptionStatus.ACTIVE,
                notes=notes,
                renewed_from_id=renewed_from_id,
            )
        )

    # ==================== Renewal ====================

    def renew_subscription(
        self,
        ctx: GymContext,
        subscription_id: int,
        package_id: int,
        price_paid: Decimal,
        start_date: Optional[date] = None,
        trainer_id: Optional[int] = None,
        trainer_addon_price: Decimal = ZERO,
        notes: Optional[str] = None,
    ) -> SubscriptionWithInvoice:
        """
        Create the follow-on subscription and invoice, then expire the old one.

        ``start_date`` defaults to the later of the old end date and
        tomorrow. It is not checked for overlap with the old period.

        Raises:
            SubscriptionNotFoundError: Unknown subscription
            SubscriptionClosedError: The old subscription was cancelled
        """
        price_paid, trainer_addon_price = self._validate_prices(price_paid, trainer_addon_price, trainer_id)
        with self._operation("subscription.renew", gym_id=ctx.gym_id, subscription_id=subscription_id):
            with self.unit_of_work() as uow:
                old = self._get(uow, ctx, subscription_id, for_update=True)
                if old.status is SubscriptionStatus.CANCELLED:
                    raise SubscriptionClosedError(old.id, old.status.value)

                if start_date is None:
                    start_date = default_renewal_start(old.end_date, self._today(ctx))

                renewed = self.create_subscription_in(
                    uow,
                    ctx,
                    member_id=old.member_id,
                    package_id=package_id,
                    start_date=start_date,
                    price_paid=price_paid,
                    trainer_id=trainer_id,
                    trainer_addon_price=trainer_addon_price,
                    notes=notes,
                    renewed_from_id=old.id,
                )
                invoice = self.invoices.create_invoice_in(
                    uow,
                    ctx,
                    member_id=old.member_id,
                    subscription_id=renewed.id,
                    amount=price_paid,
                )
                old.status = SubscriptionStatus.EXPIRED
                uow.flush()

                self._logger.info(
                    "subscription.renewed",
                    gym_id=ctx.gym_id,
                    old_subscription_id=old.id,
                    subscription_id=renewed.id,
                    member_id=old.member_id,
                    start_date=renewed.start_date.isoformat(),
                    end_date=renewed.end_date.isoformat(),
                    invoice_id=invoice.id,
                )
                return SubscriptionWithInvoice(
                    subscription=to_schema(renewed, SubscriptionResponse),
                    invoice=self.invoices.to_response(uow, ctx, invoice),
                )

    # ==================== Cancellation ====================

    def cancel_subscription(
        self,
        ctx: GymContext,
        subscription_id: int,
        cancel_invoice: bool = False,
    ) -> SubscriptionResponse:
        """
        Cancel a subscription. Cancelled is terminal.

        With ``cancel_invoice`` the linked invoice is cancelled in the same
        unit of work, which fails if it has payments.
        """
        with self._operation("subscription.cancel", gym_id=ctx.gym_id, subscription_id=subscription_id):
            with self.unit_of_work() as uow:
                subscription = self._get(uow, ctx, subscription_id, for_update=True)
                if subscription.status is SubscriptionStatus.CANCELLED:
                    raise SubscriptionClosedError(subscription.id, subscription.status.value)

                subscription.status = SubscriptionStatus.CANCELLED
                if cancel_invoice:
                    invoice = uow.get_repo(InvoiceRepository).find_by_subscription(
                        ctx.gym_id, subscription.id
                    )
                    if invoice is not None:
                        self.invoices.cancel_invoice_in(uow, ctx, invoice)
                uow.flush()

                self._logger.info(
                    "subscription.cancelled",
                    gym_id=ctx.gym_id,
                    subscription_id=subscription.id,
                    invoice_cancelled=cancel_invoice,
                )
                return to_schema(subscription, SubscriptionResponse)

    # ==================== Queries ====================

    def get_subscription(self, ctx: GymContext, subscription_id: int) -> SubscriptionResponse:
        with self.unit_of_work() as uow:
            return to_schema(self._get(uow, ctx, subscription_id), SubscriptionResponse)

    def list_subscriptions(
        self,
        ctx: GymContext,
        member_id: Optional[int] = None,
        status: Optional[SubscriptionStatus] = None,
        trainer_id: Optional[int] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> PaginatedResponse[SubscriptionResponse]:
        params = normalize_pagination(page, page_size)
        with self.unit_of_work() as uow:
            subscriptions = uow.get_repo(SubscriptionRepository)
            stmt = subscriptions.search_query(ctx.gym_id, member_id, status, trainer_id)
            items, total = subscriptions.paginate(stmt, params)
            return paginate_items(
                items=items,
                total_items=total,
                params=params,
                mapper=lambda s: to_schema(s, SubscriptionResponse),
            )

    def subscription_history(self, ctx: GymContext, member_id: int) -> List[SubscriptionResponse]:
        """Every subscription of a member, oldest first, including expired and cancelled."""
        with self.unit_of_work() as uow:
            if uow.get_repo(MemberRepository).find_in_gym(ctx.gym_id, member_id) is None:
                raise MemberNotFoundError(member_id)
            return to_schema_list(
                uow.get_repo(SubscriptionRepository).history_for_member(ctx.gym_id, member_id),
                SubscriptionResponse,
            )

    def get_active_subscription(self, ctx: GymContext, member_id: int) -> Optional[SubscriptionResponse]:
        """
        The member's Active subscription, or None.

        When several are Active the one starting last wins.

        Raises:
            MemberNotFoundError: No such member in the gym
        """
        with self.unit_of_work() as uow:
            if uow.get_repo(MemberRepository).find_in_gym(ctx.gym_id, member_id) is None:
                raise MemberNotFoundError(member_id)
            subscription = uow.get_repo(SubscriptionRepository).active_for_member(ctx.gym_id, member_id)
            return to_schema(subscription, SubscriptionResponse) if subscription is not None else None

    # ==================== Internals ====================

    @staticmethod
    def _validate_prices(price_paid, trainer_addon_price, trainer_id) -> tuple:
        price_paid = money(price_paid, "price_paid")
        trainer_addon_price = money(trainer_addon_price, "trainer_addon_price")
        if trainer_addon_price > ZERO and trainer_id is None:
            raise InvalidAmountError(
                "A trainer add-on price requires a trainer",
                field="trainer_addon_price",
                details={"trainer_addon_price": trainer_addon_price},
            )
        return price_paid, trainer_addon_price

    @staticmethod
    def _get(uow: UnitOfWork, ctx: GymContext, subscription_id: int, for_update: bool = False) -> Subscription:
        subscription = uow.get_repo(SubscriptionRepository).find_in_gym(
            ctx.gym_id, subscription_id, for_update
        )
        if subscription is None:
            raise SubscriptionNotFoundError(subscription_id)
        return subscription

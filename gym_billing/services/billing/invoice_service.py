"""
Invoice Service

Creates invoices, numbers them per gym, derives their status from the
payments received and the calendar, and sweeps overdue invoices for an
external scheduler.

Status rules:

- Cancelled is terminal and never re-derived.
- Paid when the amount paid reaches the net amount (a zero-net invoice is
  Paid from creation).
- PartiallyPaid when something but not everything is paid, even after the
  due date. ``is_overdue`` on the read model still flags it.
- Overdue when nothing is paid and today is after the due date.
- Unpaid otherwise.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytz

from gym_billing.core.constants import INVOICE_NUMBER_PREFIX, ZERO
from gym_billing.core.pagination import normalize_pagination, paginate_items
from gym_billing.models.base import InvoiceStatus
from gym_billing.models.billing.invoice import Invoice
from gym_billing.repositories.billing import (
    InvoiceRepository,
    InvoiceSequenceRepository,
    TransactionRepository,
)
from gym_billing.repositories.membership import MemberRepository, SubscriptionRepository
from gym_billing.schemas.billing.invoice import InvoiceResponse, RevenueSummary
from gym_billing.schemas.common.pagination import PaginatedResponse
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services.base import BaseService
from gym_billing.services.common.errors import (
    InvalidAmountError,
    InvoiceAlreadyExistsError,
    InvoiceClosedError,
    InvoiceHasPaymentsError,
    InvoiceNotFoundError,
    MemberNotFoundError,
    SubscriptionNotFoundError,
    ValidationError,
)
from gym_billing.services.common.mapping import to_schema
from gym_billing.services.common.unit_of_work import UnitOfWork
from gym_billing.services.common.validators import money, validate_period
from gym_billing.utils.datetime_utils import DateRangeHelper


def derive_status(
    current: InvoiceStatus,
    net_amount: Decimal,
    amount_paid: Decimal,
    due_date: date,
    today: date,
) -> InvoiceStatus:
    """Status of an invoice given what has been paid and today's date."""
    if current is InvoiceStatus.CANCELLED:
        return InvoiceStatus.CANCELLED
    if amount_paid >= net_amount:
        return InvoiceStatus.PAID
    if amount_paid > ZERO:
        return InvoiceStatus.PARTIALLY_PAID
    if today > due_date:
        return InvoiceStatus.OVERDUE
    return InvoiceStatus.UNPAID


def format_invoice_number(issue_date: date, sequence: int) -> str:
    return f"{INVOICE_NUMBER_PREFIX}-{issue_date:%Y%m%d}-{sequence:04d}"


class InvoiceService(BaseService):
    """Invoice creation, status derivation and invoice queries."""

    # ==================== Creation ====================

    def create_invoice(
        self,
        ctx: GymContext,
        member_id: int,
        subscription_id: int,
        amount: Decimal,
        discount: Decimal = ZERO,
        due_in_days: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> InvoiceResponse:
        """
        Create an invoice for a subscription.

        ``net_amount = amount - discount``; the due date is today plus
        ``due_in_days`` (the gym's overdue setting by default).

        Raises:
            InvalidAmountError: Negative amounts or discount greater than amount
            MemberNotFoundError: Unknown member
            SubscriptionNotFoundError: Unknown subscription
            InvoiceAlreadyExistsError: The subscription already has an invoice
        """
        amount, discount = self.validate_amounts(amount, discount)
        with self._operation("invoice.create", gym_id=ctx.gym_id, subscription_id=subscription_id):
            with self.unit_of_work() as uow:
                invoice = self.create_invoice_in(
                    uow,
                    ctx,
                    member_id=member_id,
                    subscription_id=subscription_id,
                    amount=amount,
                    discount=discount,
                    due_in_days=due_in_days,
                    notes=notes,
                )
                return self.to_response(uow, ctx, invoice)

    @staticmethod
    def validate_amounts(amount: Decimal, discount: Decimal) -> tuple:
        amount = money(amount, "amount")
        discount = money(discount, "discount")
        if discount > amount:
            raise InvalidAmountError(
                f"Discount {discount} exceeds amount {amount}",
                field="discount",
                details={"amount": amount, "discount": discount},
            )
        return amount, discount

    def create_invoice_in(
        self,
        uow: UnitOfWork,
        ctx: GymContext,
        member_id: int,
        subscription_id: int,
        amount: Decimal,
        discount: Decimal = ZERO,
        due_in_days: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Invoice:
        """Create an invoice inside the caller's unit of work."""
        amount, discount = self.validate_amounts(amount, discount)
        if due_in_days is None:
            due_in_days = ctx.settings.invoice_overdue_in_days
        if due_in_days < 0:
            raise ValidationError("due_in_days must not be negative", field="due_in_days")

        if uow.get_repo(MemberRepository).find_in_gym(ctx.gym_id, member_id) is None:
            raise MemberNotFoundError(member_id)
        subscription = uow.get_repo(SubscriptionRepository).find_in_gym(ctx.gym_id, subscription_id)
        if subscription is None:
            raise SubscriptionNotFoundError(subscription_id)
        if subscription.member_id != member_id:
            raise ValidationError(
                f"Subscription {subscription_id} does not belong to member {member_id}",
                field="subscription_id",
            )
        existing = uow.get_repo(InvoiceRepository).find_by_subscription(ctx.gym_id, subscription_id)
        if existing is not None:
            raise InvoiceAlreadyExistsError(subscription_id, existing.id)

        issue_date = self._today(ctx)
        sequence = uow.get_repo(InvoiceSequenceRepository).next_number(ctx.gym_id)
        net_amount = amount - discount
        now = self._now()

        invoice = Invoice(
            gym_id=ctx.gym_id,
            member_id=member_id,
            subscription_id=subscription_id,
            invoice_number=format_invoice_number(issue_date, sequence),
            amount=amount,
            discount=discount,
            net_amount=net_amount,
            issue_date=issue_date,
            due_date=issue_date + timedelta(days=due_in_days),
            notes=notes,
        )
        invoice.status = derive_status(
            InvoiceStatus.UNPAID, net_amount, ZERO, invoice.due_date, issue_date
        )
        if invoice.status is InvoiceStatus.PAID:
            invoice.paid_at = now
        uow.get_repo(InvoiceRepository).add(invoice)

        self._logger.info(
            "invoice.created",
            gym_id=ctx.gym_id,
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            member_id=member_id,
            subscription_id=subscription_id,
            net_amount=str(net_amount),
            status=invoice.status.value,
        )
        return invoice

    # ==================== State changes ====================

    def cancel_invoice(self, ctx: GymContext, invoice_id: int) -> InvoiceResponse:
        """
        Cancel an invoice that has not received any payment.

        Raises:
            InvoiceHasPaymentsError: Payments are recorded against it
            InvoiceClosedError: Already Paid or Cancelled
        """
        with self._operation("invoice.cancel", gym_id=ctx.gym_id, invoice_id=invoice_id):
            with self.unit_of_work() as uow:
                invoice = self.get_for_update_in(uow, ctx, invoice_id)
                self.cancel_invoice_in(uow, ctx, invoice)
                return self.to_response(uow, ctx, invoice)

    def cancel_invoice_in(self, uow: UnitOfWork, ctx: GymContext, invoice: Invoice) -> Invoice:
        if uow.get_repo(TransactionRepository).count_for_invoice(invoice.id) > 0:
            raise InvoiceHasPaymentsError(invoice.id)
        if invoice.status not in (InvoiceStatus.UNPAID, InvoiceStatus.OVERDUE):
            raise InvoiceClosedError(invoice.id, invoice.status.value)
        invoice.status = InvoiceStatus.CANCELLED
        uow.flush()
        self._logger.info("invoice.cancelled", gym_id=ctx.gym_id, invoice_id=invoice.id)
        return invoice

    def refresh_status_in(self, uow: UnitOfWork, ctx: GymContext, invoice: Invoice) -> Decimal:
        """
        Re-derive and store an invoice's status from its payments.

        Returns:
            The amount paid so far
        """
        amount_paid = uow.get_repo(TransactionRepository).total_paid(invoice.id)
        invoice.status = derive_status(
            invoice.status, invoice.net_amount, amount_paid, invoice.due_date, self._today(ctx)
        )
        if invoice.status is InvoiceStatus.PAID:
            if invoice.paid_at is None:
                invoice.paid_at = self._now()
        else:
            invoice.paid_at = None
        uow.flush()
        return amount_paid

    def sweep_overdue(self, ctx: GymContext) -> int:
        """
        Store Overdue on every past-due invoice with nothing paid.

        Meant to be run by an external scheduler; reads already report the
        derived status without it.

        Returns:
            Number of invoices updated
        """
        with self.unit_of_work() as uow:
            today = self._today(ctx)
            invoices = uow.get_repo(InvoiceRepository).find_past_due_unpaid(ctx.gym_id, today)
            for invoice in invoices:
                invoice.status = InvoiceStatus.OVERDUE
            uow.flush()
        self._logger.info("invoice.overdue_swept", gym_id=ctx.gym_id, updated=len(invoices))
        return len(invoices)

    # ==================== Queries ====================

    def get_invoice(self, ctx: GymContext, invoice_id: int) -> InvoiceResponse:
        with self.unit_of_work() as uow:
            invoice = uow.get_repo(InvoiceRepository).find_in_gym(ctx.gym_id, invoice_id)
            if invoice is None:
                raise InvoiceNotFoundError(invoice_id)
            return self.to_response(uow, ctx, invoice)

    def get_invoice_for_subscription(self, ctx: GymContext, subscription_id: int) -> InvoiceResponse:
        with self.unit_of_work() as uow:
            invoice = uow.get_repo(InvoiceRepository).find_by_subscription(ctx.gym_id, subscription_id)
            if invoice is None:
                raise InvoiceNotFoundError(f"subscription:{subscription_id}")
            return self.to_response(uow, ctx, invoice)

    def list_invoices(
        self,
        ctx: GymContext,
        member_id: Optional[int] = None,
        status: Optional[InvoiceStatus] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> PaginatedResponse[InvoiceResponse]:
        """Invoices filtered by member and by status as of today."""
        params = normalize_pagination(page, page_size)
        with self.unit_of_work() as uow:
            invoices = uow.get_repo(InvoiceRepository)
            stmt = invoices.search_query(ctx.gym_id, self._today(ctx), member_id, status)
            items, total = invoices.paginate(stmt, params)
            return paginate_items(
                items=items,
                total_items=total,
                params=params,
                mapper=lambda inv: self.to_response(uow, ctx, inv),
            )

    def total_revenue(self, ctx: GymContext, month: int, year: int) -> RevenueSummary:
        """Payments received during a calendar month in the gym's timezone."""
        validate_period(month, year)
        first, last = DateRangeHelper.get_month_range(year, month)
        tz = pytz.timezone(ctx.settings.timezone)
        start = tz.localize(datetime.combine(first, datetime.min.time())).astimezone(pytz.UTC)
        end = tz.localize(
            datetime.combine(last + timedelta(days=1), datetime.min.time())
        ).astimezone(pytz.UTC)
        with self.unit_of_work() as uow:
            total = uow.get_repo(TransactionRepository).total_received(ctx.gym_id, start, end)
        return RevenueSummary(month=month, year=year, total_revenue=total)

    # ==================== Helpers ====================

    def get_for_update_in(self, uow: UnitOfWork, ctx: GymContext, invoice_id: int) -> Invoice:
        invoice = uow.get_repo(InvoiceRepository).find_in_gym(ctx.gym_id, invoice_id, for_update=True)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)
        return invoice

    def to_response(self, uow: UnitOfWork, ctx: GymContext, invoice: Invoice) -> InvoiceResponse:
        """Read model with payment totals and the status as seen today."""
        today = self._today(ctx)
        amount_paid = uow.get_repo(TransactionRepository).total_paid(invoice.id)
        balance_due = max(invoice.net_amount - amount_paid, ZERO)
        status = derive_status(invoice.status, invoice.net_amount, amount_paid, invoice.due_date, today)
        return to_schema(
            invoice,
            InvoiceResponse,
            status=status,
            amount_paid=amount_paid,
            balance_due=balance_due,
            is_overdue=(
                status is not InvoiceStatus.CANCELLED
                and balance_due > ZERO
                and today > invoice.due_date
            ),
        )


"""
Payment Service

Records and deletes payments against invoices. Each operation writes the
transaction row, the invoice status and the ledger posting in one unit of
work, so a failure at any step leaves none of them behind.
"""

from decimal import Decimal
from typing import List, Optional

from gym_billing.core.constants import ZERO
from gym_billing.models.base import InvoiceStatus, PaymentMethod, ReferenceType
from gym_billing.models.billing.transaction import Transaction
from gym_billing.repositories.billing import InvoiceRepository, TransactionRepository
from gym_billing.schemas.billing.invoice import InvoiceResponse, TransactionResponse
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services.accounting.ledger_service import LedgerService
from gym_billing.services.base import BaseService
from gym_billing.services.billing.invoice_service import InvoiceService
from gym_billing.services.common.errors import (
    InvoiceClosedError,
    InvoiceNotFoundError,
    OverpaymentRejectedError,
    TransactionNotFoundError,
)
from gym_billing.services.common.mapping import to_schema, to_schema_list
from gym_billing.services.common.validators import positive_money


class PaymentService(BaseService):
    """Payments received against invoices."""

    def __init__(self, session_factory, clock=None):
        super().__init__(session_factory, clock)
        self.ledger = LedgerService(session_factory, clock)
        self.invoices = InvoiceService(session_factory, clock)

    def record_payment(
        self,
        ctx: GymContext,
        invoice_id: int,
        account_id: int,
        amount: Decimal,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        reference_number: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> TransactionResponse:
        """
        Record a payment and credit it to ``account_id``.

        The invoice becomes Paid when the payments reach its net amount,
        PartiallyPaid otherwise; ``paid_at`` is set only when fully paid.

        Raises:
            InvalidAmountError: ``amount`` is not positive
            InvoiceClosedError: The invoice is Paid or Cancelled
            OverpaymentRejectedError: The payment exceeds the remaining balance
        """
        amount = positive_money(amount, "amount")
        with self._operation("payment.record", gym_id=ctx.gym_id, invoice_id=invoice_id):
            with self.unit_of_work() as uow:
                txn = self.record_payment_in(
                    uow,
                    ctx,
                    invoice_id=invoice_id,
                    account_id=account_id,
                    amount=amount,
                    payment_method=payment_method,
                    reference_number=reference_number,
                    notes=notes,
                )
                return to_schema(txn, TransactionResponse)

    def settle_invoice(
        self,
        ctx: GymContext,
        invoice_id: int,
        account_id: int,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        reference_number: Optional[str] = None,
    ) -> TransactionResponse:
        """Pay whatever is left on an invoice."""
        with self._operation("invoice.settle", gym_id=ctx.gym_id, invoice_id=invoice_id):
            with self.unit_of_work() as uow:
                invoice = self.invoices.get_for_update_in(uow, ctx, invoice_id)
                if invoice.status.is_closed:
                    raise InvoiceClosedError(invoice.id, invoice.status.value)
                balance_due = invoice.net_amount - uow.get_repo(TransactionRepository).total_paid(invoice.id)
                txn = self.record_payment_in(
                    uow,
                    ctx,
                    invoice_id=invoice_id,
                    account_id=account_id,
                    amount=balance_due,
                    payment_method=payment_method,
                    reference_number=reference_number,
                    notes="Settled remaining balance",
                )
                return to_schema(txn, TransactionResponse)

    def record_payment_in(
        self,
        uow,
        ctx: GymContext,
        invoice_id: int,
        account_id: int,
        amount: Decimal,
        payment_method: PaymentMethod,
        reference_number: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Transaction:
        amount = positive_money(amount, "amount")
        invoice = self.invoices.get_for_update_in(uow, ctx, invoice_id)
        if invoice.status.is_closed:
            raise InvoiceClosedError(invoice.id, invoice.status.value)

        transactions = uow.get_repo(TransactionRepository)
        balance_due = invoice.net_amount - transactions.total_paid(invoice.id)
        if amount > balance_due:
            raise OverpaymentRejectedError(invoice.id, amount, balance_due)

        entry = self.ledger.post_in(
            uow,
            ctx,
            account_id=account_id,
            reference_type=ReferenceType.FEE,
            reference_id=invoice.id,
            credit=amount,
            description=f"Payment for invoice {invoice.invoice_number}",
            reference_no=reference_number,
        )
        txn = transactions.add(
            Transaction(
                gym_id=ctx.gym_id,
                invoice_id=invoice.id,
                account_id=account_id,
                ledger_entry_id=entry.id,
                amount=amount,
                payment_method=payment_method,
                reference_number=reference_number,
                notes=notes,
                paid_at=self._now(),
            )
        )
        invoice.payment_method = payment_method
        amount_paid = self.invoices.refresh_status_in(uow, ctx, invoice)

        self._logger.info(
            "payment.recorded",
            gym_id=ctx.gym_id,
            transaction_id=txn.id,
            invoice_id=invoice.id,
            account_id=account_id,
            amount=str(amount),
            amount_paid=str(amount_paid),
            invoice_status=invoice.status.value,
        )
        return txn

    def delete_payment(self, ctx: GymContext, transaction_id: int) -> InvoiceResponse:
        """
        Undo a payment: reverse its ledger posting, delete it and re-derive
        the invoice status.

        Raises:
            TransactionNotFoundError: Unknown payment
            InvoiceClosedError: The invoice has been cancelled
        """
        with self._operation("payment.delete", gym_id=ctx.gym_id, transaction_id=transaction_id):
            with self.unit_of_work() as uow:
                transactions = uow.get_repo(TransactionRepository)
                txn = transactions.find_in_gym(ctx.gym_id, transaction_id, for_update=True)
                if txn is None:
                    raise TransactionNotFoundError(transaction_id)

                invoice = self.invoices.get_for_update_in(uow, ctx, txn.invoice_id)
                if invoice.status is InvoiceStatus.CANCELLED:
                    raise InvoiceClosedError(invoice.id, invoice.status.value)

                self.ledger.reverse_in(
                    uow,
                    ctx,
                    txn.ledger_entry_id,
                    description=f"Payment {txn.id} deleted from invoice {invoice.invoice_number}",
                )
                amount = txn.amount
                transactions.delete(txn)
                amount_paid = self.invoices.refresh_status_in(uow, ctx, invoice)
                if amount_paid == ZERO:
                    invoice.payment_method = None

                self._logger.info(
                    "payment.deleted",
                    gym_id=ctx.gym_id,
                    transaction_id=transaction_id,
                    invoice_id=invoice.id,
                    amount=str(amount),
                    amount_paid=str(amount_paid),
                    invoice_status=invoice.status.value,
                )
                return self.invoices.to_response(uow, ctx, invoice)

    # ==================== Queries ====================

    def get_payment(self, ctx: GymContext, transaction_id: int) -> TransactionResponse:
        with self.unit_of_work() as uow:
            txn = uow.get_repo(TransactionRepository).find_in_gym(ctx.gym_id, transaction_id)
            if txn is None:
                raise TransactionNotFoundError(transaction_id)
            return to_schema(txn, TransactionResponse)

    def list_payments(self, ctx: GymContext, invoice_id: int) -> List[TransactionResponse]:
        with self.unit_of_work() as uow:
            if uow.get_repo(InvoiceRepository).find_in_gym(ctx.gym_id, invoice_id) is None:
                raise InvoiceNotFoundError(invoice_id)
            return to_schema_list(
                uow.get_repo(TransactionRepository).list_for_invoice(invoice_id),
                TransactionResponse,
            )

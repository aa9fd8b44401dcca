"""Invoices and payment transactions."""
from gym_billing.models.billing.invoice import Invoice, InvoiceSequence
from gym_billing.models.billing.transaction import Transaction

__all__ = ["Invoice", "InvoiceSequence", "Transaction"]

from gym_billing.repositories.billing.invoice_repository import (
    InvoiceRepository,
    InvoiceSequenceRepository,
)
from gym_billing.repositories.billing.transaction_repository import TransactionRepository

__all__ = ["InvoiceRepository", "InvoiceSequenceRepository", "TransactionRepository"]

from gym_billing.schemas.billing.invoice import (
    InvoiceCreate,
    InvoiceResponse,
    OverdueSweepResult,
    PaymentCreate,
    RevenueSummary,
    SettleInvoiceRequest,
    TransactionResponse,
)

__all__ = [
    "InvoiceCreate",
    "InvoiceResponse",
    "PaymentCreate",
    "SettleInvoiceRequest",
    "TransactionResponse",
    "OverdueSweepResult",
    "RevenueSummary",
]

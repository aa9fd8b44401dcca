from gym_billing.services.billing.invoice_service import InvoiceService, derive_status
from gym_billing.services.billing.payment_service import PaymentService

__all__ = ["InvoiceService", "PaymentService", "derive_status"]

"""
Database enums.

Closed vocabularies for every status and type column. Each column is mapped
with ``SQLEnum`` over these classes, so filters compare enum members rather
than free-form strings.
"""

import enum


class AccountType(str, enum.Enum):
    """Kind of money account."""
    BANK = "bank"
    CASH = "cash"


class ReferenceType(str, enum.Enum):
    """What a ledger entry refers to."""
    FEE = "fee"
    EXPENSE = "expense"
    ADJUSTMENT = "adjustment"
    SALARY_PAYMENT = "salary_payment"


class InvoiceStatus(str, enum.Enum):
    """Invoice lifecycle status."""
    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"

    @property
    def is_closed(self) -> bool:
        """Closed invoices accept no further payments."""
        return self in (InvoiceStatus.PAID, InvoiceStatus.CANCELLED)


class SubscriptionStatus(str, enum.Enum):
    """Subscription lifecycle status."""
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    """Salary slip payment status."""
    UNPAID = "unpaid"
    PAID = "paid"


class PaymentMethod(str, enum.Enum):
    """How a member paid."""
    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    UPI = "upi"
    CHEQUE = "cheque"
    ONLINE = "online"

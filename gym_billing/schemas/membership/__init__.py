from gym_billing.schemas.membership.subscription import (
    SubscriptionCancel,
    SubscriptionCreate,
    SubscriptionRenew,
    SubscriptionResponse,
    SubscriptionWithInvoice,
)

__all__ = [
    "SubscriptionCreate",
    "SubscriptionRenew",
    "SubscriptionCancel",
    "SubscriptionResponse",
    "SubscriptionWithInvoice",
]

from gym_billing.services.membership.subscription_service import (
    SubscriptionService,
    default_renewal_start,
)

__all__ = ["SubscriptionService", "default_renewal_start"]

from gym_billing.repositories.membership.member_repository import (
    MemberRepository,
    PackageRepository,
    TrainerRepository,
)
from gym_billing.repositories.membership.subscription_repository import SubscriptionRepository

__all__ = ["MemberRepository", "PackageRepository", "SubscriptionRepository", "TrainerRepository"]

"""Members, trainers, packages and subscriptions."""
from gym_billing.models.membership.member import Member
from gym_billing.models.membership.package import Package
from gym_billing.models.membership.subscription import Subscription
from gym_billing.models.membership.trainer import Trainer

__all__ = ["Member", "Package", "Subscription", "Trainer"]

"""
Package model.

Pricing template for subscriptions. Subscriptions snapshot the price and
duration at creation, so editing a package only affects future sign-ups.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gym_billing.models.base import Money, TenantModel


class Package(TenantModel):
    __tablename__ = "packages"
    __table_args__ = (
        CheckConstraint("duration_days > 0", name="ck_package_duration_positive"),
        CheckConstraint("price >= 0", name="ck_package_price_non_negative"),
    )

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
    visits_limit: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    allows_trainer_addon: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

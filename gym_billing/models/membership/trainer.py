"""Trainer model. Owned by the trainer roster; billing only references it."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from gym_billing.models.base import Money, TenantModel


class Trainer(TenantModel):
    __tablename__ = "trainers"

    first_name: Mapped[str] = mapped_column(String(80), nullable=False)
    last_name: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    monthly_addon_price: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
        default=Decimal("0.00"),
        comment="Suggested personal-training add-on price per month",
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

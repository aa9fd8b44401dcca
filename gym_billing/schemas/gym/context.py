# --- File: gym_billing/schemas/gym/context.py ---
"""
Gym context passed explicitly into every service operation.
"""

from __future__ import annotations

from typing import Optional

import pytz
from pydantic import BaseModel, ConfigDict, Field, field_validator

from gym_billing.config.settings import settings as app_settings

__all__ = ["GymSettings", "GymSettingsUpdate", "GymContext"]


class GymSettings(BaseModel):
    """Billing settings of one gym."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    invoice_overdue_in_days: int = Field(
        default_factory=lambda: app_settings.DEFAULT_INVOICE_OVERDUE_DAYS,
        ge=1,
        description="Days from issue until an invoice is due",
    )
    member_inactive_in_days: int = Field(
        default_factory=lambda: app_settings.DEFAULT_MEMBER_INACTIVE_DAYS,
        ge=1,
        description="Days without a subscription before a member counts as inactive",
    )
    timezone: str = Field(default_factory=lambda: app_settings.DEFAULT_TIMEZONE)
    currency: str = Field(
        default_factory=lambda: app_settings.CURRENCY,
        min_length=3,
        max_length=3,
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        if v not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone '{v}'")
        return v

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.upper()


class GymSettingsUpdate(BaseModel):
    """Partial update of gym settings."""

    invoice_overdue_in_days: Optional[int] = Field(default=None, ge=1)
    member_inactive_in_days: Optional[int] = Field(default=None, ge=1)
    timezone: Optional[str] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)


class GymContext(BaseModel):
    """The gym an operation runs for, with that gym's settings."""

    model_config = ConfigDict(frozen=True)

    gym_id: int = Field(..., ge=1)
    settings: GymSettings = Field(default_factory=GymSettings)

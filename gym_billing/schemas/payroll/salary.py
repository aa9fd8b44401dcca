# --- File: gym_billing/schemas/payroll/salary.py ---
"""
Trainer salary schemas.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from gym_billing.models.base import PaymentStatus
from gym_billing.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    MoneyAmount,
    NonNegativeMoney,
)

__all__ = [
    "SalaryConfigCreate",
    "SalaryConfigResponse",
    "SalarySlipGenerate",
    "BatchGenerateRequest",
    "MarkPaidRequest",
    "SalarySlipResponse",
    "BatchGenerationResult",
    "SalarySlipSummary",
    "ActiveMemberCount",
]


class SalaryConfigCreate(BaseCreateSchema):
    base_salary: NonNegativeMoney
    per_member_incentive: NonNegativeMoney
    effective_from: date


class SalaryConfigResponse(BaseResponseSchema):
    trainer_id: int
    base_salary: MoneyAmount
    per_member_incentive: MoneyAmount
    effective_from: date
    is_active: bool


class SalarySlipGenerate(BaseSchema):
    trainer_id: int
    month: int
    year: int


class BatchGenerateRequest(BaseSchema):
    month: int
    year: int


class MarkPaidRequest(BaseSchema):
    account_id: int


class SalarySlipResponse(BaseResponseSchema):
    trainer_id: int
    month: int
    year: int
    base_salary: MoneyAmount
    active_member_count: int
    per_member_incentive: MoneyAmount
    incentive_total: MoneyAmount
    gross_salary: MoneyAmount
    payment_status: PaymentStatus
    generated_at: datetime
    paid_at: Optional[datetime] = None
    paid_account_id: Optional[int] = None
    ledger_entry_id: Optional[int] = None


class BatchGenerationResult(BaseSchema):
    """Outcome of generating slips for every active trainer."""

    month: int
    year: int
    generated: List[SalarySlipResponse] = Field(default_factory=list)
    skipped_existing: List[int] = Field(default_factory=list, description="Trainer IDs")
    skipped_no_config: List[int] = Field(default_factory=list, description="Trainer IDs")


class SalarySlipSummary(BaseSchema):
    total_salary_payout: MoneyAmount
    total_incentives: MoneyAmount
    total_base_salary: MoneyAmount
    slip_count: int


class ActiveMemberCount(BaseSchema):
    trainer_id: int
    month: int
    year: int
    active_member_count: int

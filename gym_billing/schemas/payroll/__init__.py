from gym_billing.schemas.payroll.salary import (
    ActiveMemberCount,
    BatchGenerateRequest,
    BatchGenerationResult,
    MarkPaidRequest,
    SalaryConfigCreate,
    SalaryConfigResponse,
    SalarySlipGenerate,
    SalarySlipResponse,
    SalarySlipSummary,
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

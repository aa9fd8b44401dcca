"""Salary slip endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from gym_billing.api.deps import RequirePermission, get_gym_context, get_salary_slip_service
from gym_billing.models.base import PaymentStatus
from gym_billing.schemas.common.pagination import PaginatedResponse
from gym_billing.schemas.gym.context import GymContext
from gym_billing.schemas.payroll.salary import (
    BatchGenerateRequest,
    BatchGenerationResult,
    MarkPaidRequest,
    SalarySlipGenerate,
    SalarySlipResponse,
    SalarySlipSummary,
)
from gym_billing.services import SalarySlipService
from gym_billing.services.common.permissions import SALARY_MANAGE, SALARY_PAY, SALARY_VIEW

router = APIRouter(prefix="/salary-slips", tags=["Salary Slips"])


@router.post(
    "/generate",
    response_model=SalarySlipResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequirePermission(SALARY_MANAGE))],
)
def generate_salary_slip(
    payload: SalarySlipGenerate,
    ctx: GymContext = Depends(get_gym_context),
    service: SalarySlipService = Depends(get_salary_slip_service),
):
    """Generate one slip. An existing slip for the period is a 409, never overwritten."""
    return service.generate_salary_slip(ctx, payload.trainer_id, payload.month, payload.year)


@router.post(
    "/generate-all",
    response_model=BatchGenerationResult,
    dependencies=[Depends(RequirePermission(SALARY_MANAGE))],
)
def generate_for_all(
    payload: BatchGenerateRequest,
    ctx: GymContext = Depends(get_gym_context),
    service: SalarySlipService = Depends(get_salary_slip_service),
):
    return service.generate_for_all(ctx, payload.month, payload.year)


@router.get(
    "",
    response_model=PaginatedResponse[SalarySlipResponse],
    dependencies=[Depends(RequirePermission(SALARY_VIEW))],
)
def list_slips(
    trainer_id: Optional[int] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    payment_status: Optional[PaymentStatus] = None,
    page: Optional[int] = Query(default=None, ge=1),
    page_size: Optional[int] = Query(default=None, ge=1),
    ctx: GymContext = Depends(get_gym_context),
    service: SalarySlipService = Depends(get_salary_slip_service),
):
    return service.list_slips(
        ctx,
        trainer_id=trainer_id,
        month=month,
        year=year,
        payment_status=payment_status,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/summary",
    response_model=SalarySlipSummary,
    dependencies=[Depends(RequirePermission(SALARY_VIEW))],
)
def slip_summary(
    trainer_id: Optional[int] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    payment_status: Optional[PaymentStatus] = None,
    ctx: GymContext = Depends(get_gym_context),
    service: SalarySlipService = Depends(get_salary_slip_service),
):
    return service.slip_summary(
        ctx,
        trainer_id=trainer_id,
        month=month,
        year=year,
        payment_status=payment_status,
    )


@router.get(
    "/{slip_id}",
    response_model=SalarySlipResponse,
    dependencies=[Depends(RequirePermission(SALARY_VIEW))],
)
def get_slip(
    slip_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: SalarySlipService = Depends(get_salary_slip_service),
):
    return service.get_slip(ctx, slip_id)


@router.post(
    "/{slip_id}/mark-paid",
    response_model=SalarySlipResponse,
    dependencies=[Depends(RequirePermission(SALARY_PAY))],
)
def mark_as_paid(
    slip_id: int,
    payload: MarkPaidRequest,
    ctx: GymContext = Depends(get_gym_context),
    service: SalarySlipService = Depends(get_salary_slip_service),
):
    return service.mark_as_paid(ctx, slip_id, payload.account_id)


@router.post(
    "/{slip_id}/mark-unpaid",
    response_model=SalarySlipResponse,
    dependencies=[Depends(RequirePermission(SALARY_PAY))],
)
def mark_as_unpaid(
    slip_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: SalarySlipService = Depends(get_salary_slip_service),
):
    return service.mark_as_unpaid(ctx, slip_id)

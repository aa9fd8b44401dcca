"""Trainer salary configuration endpoints."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from gym_billing.api.deps import (
    RequirePermission,
    get_gym_context,
    get_salary_config_service,
    get_salary_slip_service,
)
from gym_billing.schemas.gym.context import GymContext
from gym_billing.schemas.payroll.salary import ActiveMemberCount, SalaryConfigCreate, SalaryConfigResponse
from gym_billing.services import SalaryConfigService, SalarySlipService
from gym_billing.services.common.permissions import SALARY_MANAGE, SALARY_VIEW

router = APIRouter(tags=["Trainer Salary"])


@router.post(
    "/trainers/{trainer_id}/salary-config",
    response_model=SalaryConfigResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequirePermission(SALARY_MANAGE))],
)
def set_salary_config(
    trainer_id: int,
    payload: SalaryConfigCreate,
    ctx: GymContext = Depends(get_gym_context),
    service: SalaryConfigService = Depends(get_salary_config_service),
):
    return service.set_config(ctx, trainer_id, **payload.model_dump())


@router.get(
    "/trainers/{trainer_id}/salary-config",
    response_model=SalaryConfigResponse,
    dependencies=[Depends(RequirePermission(SALARY_VIEW))],
)
def get_salary_config(
    trainer_id: int,
    as_of: Optional[date] = None,
    ctx: GymContext = Depends(get_gym_context),
    service: SalaryConfigService = Depends(get_salary_config_service),
):
    """Config in force on ``as_of``, today in the gym timezone when omitted."""
    return service.get_active_config(ctx, trainer_id, as_of)


@router.get(
    "/trainers/{trainer_id}/salary-config/history",
    response_model=List[SalaryConfigResponse],
    dependencies=[Depends(RequirePermission(SALARY_VIEW))],
)
def salary_config_history(
    trainer_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: SalaryConfigService = Depends(get_salary_config_service),
):
    return service.config_history(ctx, trainer_id)


@router.post(
    "/salary-configs/{config_id}/deactivate",
    response_model=SalaryConfigResponse,
    dependencies=[Depends(RequirePermission(SALARY_MANAGE))],
)
def deactivate_salary_config(
    config_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: SalaryConfigService = Depends(get_salary_config_service),
):
    return service.deactivate_config(ctx, config_id)


@router.get(
    "/trainers/{trainer_id}/active-members",
    response_model=ActiveMemberCount,
    dependencies=[Depends(RequirePermission(SALARY_VIEW))],
)
def active_member_count(
    trainer_id: int,
    month: int,
    year: int,
    ctx: GymContext = Depends(get_gym_context),
    service: SalarySlipService = Depends(get_salary_slip_service),
):
    return service.get_active_member_count(ctx, trainer_id, month, year)

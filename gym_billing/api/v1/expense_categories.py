"""Expense category endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from gym_billing.api.deps import RequirePermission, get_expense_category_service, get_gym_context
from gym_billing.schemas.accounting.expense import (
    ExpenseCategoryCreate,
    ExpenseCategoryResponse,
    ExpenseCategoryUpdate,
)
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services import ExpenseCategoryService
from gym_billing.services.common.permissions import EXPENSES_MANAGE, EXPENSES_VIEW

router = APIRouter(prefix="/expense-categories", tags=["Expenses"])


@router.post(
    "",
    response_model=ExpenseCategoryResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequirePermission(EXPENSES_MANAGE))],
)
def create_category(
    payload: ExpenseCategoryCreate,
    ctx: GymContext = Depends(get_gym_context),
    service: ExpenseCategoryService = Depends(get_expense_category_service),
):
    return service.create_category(ctx, **payload.model_dump())


@router.get(
    "",
    response_model=List[ExpenseCategoryResponse],
    dependencies=[Depends(RequirePermission(EXPENSES_VIEW))],
)
def list_categories(
    active_only: bool = False,
    ctx: GymContext = Depends(get_gym_context),
    service: ExpenseCategoryService = Depends(get_expense_category_service),
):
    return service.list_categories(ctx, active_only=active_only)


@router.get(
    "/active",
    response_model=List[ExpenseCategoryResponse],
    dependencies=[Depends(RequirePermission(EXPENSES_VIEW))],
)
def list_active_categories(
    ctx: GymContext = Depends(get_gym_context),
    service: ExpenseCategoryService = Depends(get_expense_category_service),
):
    return service.list_active_categories(ctx)


@router.get(
    "/{category_id}",
    response_model=ExpenseCategoryResponse,
    dependencies=[Depends(RequirePermission(EXPENSES_VIEW))],
)
def get_category(
    category_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: ExpenseCategoryService = Depends(get_expense_category_service),
):
    return service.get_category(ctx, category_id)


@router.patch(
    "/{category_id}",
    response_model=ExpenseCategoryResponse,
    dependencies=[Depends(RequirePermission(EXPENSES_MANAGE))],
)
def update_category(
    category_id: int,
    payload: ExpenseCategoryUpdate,
    ctx: GymContext = Depends(get_gym_context),
    service: ExpenseCategoryService = Depends(get_expense_category_service),
):
    return service.update_category(ctx, category_id, **payload.model_dump(exclude_unset=True))


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(RequirePermission(EXPENSES_MANAGE))],
)
def delete_category(
    category_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: ExpenseCategoryService = Depends(get_expense_category_service),
):
    service.delete_category(ctx, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Expense endpoints."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from gym_billing.api.deps import RequirePermission, get_expense_service, get_gym_context
from gym_billing.schemas.accounting.expense import (
    ExpenseCreate,
    ExpenseReportItem,
    ExpenseResponse,
    ExpenseUpdate,
)
from gym_billing.schemas.common.pagination import PaginatedResponse
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services import ExpenseService
from gym_billing.services.common.permissions import EXPENSES_MANAGE, EXPENSES_VIEW

router = APIRouter(prefix="/expenses", tags=["Expenses"])


@router.post(
    "",
    response_model=ExpenseResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequirePermission(EXPENSES_MANAGE))],
)
def record_expense(
    payload: ExpenseCreate,
    ctx: GymContext = Depends(get_gym_context),
    service: ExpenseService = Depends(get_expense_service),
):
    return service.record_expense(ctx, **payload.model_dump())


@router.get(
    "",
    response_model=PaginatedResponse[ExpenseResponse],
    dependencies=[Depends(RequirePermission(EXPENSES_VIEW))],
)
def list_expenses(
    start: Optional[date] = None,
    end: Optional[date] = None,
    category_id: Optional[int] = None,
    account_id: Optional[int] = None,
    page: Optional[int] = Query(default=None, ge=1),
    page_size: Optional[int] = Query(default=None, ge=1),
    ctx: GymContext = Depends(get_gym_context),
    service: ExpenseService = Depends(get_expense_service),
):
    return service.list_expenses(
        ctx,
        start=start,
        end=end,
        category_id=category_id,
        account_id=account_id,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/report",
    response_model=List[ExpenseReportItem],
    dependencies=[Depends(RequirePermission(EXPENSES_VIEW))],
)
def expense_report(
    start: Optional[date] = None,
    end: Optional[date] = None,
    category_id: Optional[int] = None,
    account_id: Optional[int] = None,
    ctx: GymContext = Depends(get_gym_context),
    service: ExpenseService = Depends(get_expense_service),
):
    return service.expense_report(ctx, start=start, end=end, category_id=category_id, account_id=account_id)


@router.get(
    "/{expense_id}",
    response_model=ExpenseResponse,
    dependencies=[Depends(RequirePermission(EXPENSES_VIEW))],
)
def get_expense(
    expense_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: ExpenseService = Depends(get_expense_service),
):
    return service.get_expense(ctx, expense_id)


@router.patch(
    "/{expense_id}",
    response_model=ExpenseResponse,
    dependencies=[Depends(RequirePermission(EXPENSES_MANAGE))],
)
def update_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    ctx: GymContext = Depends(get_gym_context),
    service: ExpenseService = Depends(get_expense_service),
):
    return service.update_expense(ctx, expense_id, **payload.model_dump(exclude_unset=True))


@router.delete(
    "/{expense_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(RequirePermission(EXPENSES_MANAGE))],
)
def delete_expense(
    expense_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: ExpenseService = Depends(get_expense_service),
):
    service.delete_expense(ctx, expense_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Account and ledger statement endpoints."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from gym_billing.api.deps import RequirePermission, get_account_service, get_gym_context, get_ledger_service
from gym_billing.models.base import ReferenceType
from gym_billing.schemas.accounting.account import (
    AccountCreate,
    AccountResponse,
    AccountSummary,
    AccountUpdate,
    AdjustmentRequest,
    BalanceCheck,
    IncomeExpenseSummary,
    LedgerEntryResponse,
)
from gym_billing.schemas.common.pagination import PaginatedResponse
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services import AccountService, LedgerService
from gym_billing.services.common.permissions import ACCOUNTS_MANAGE, ACCOUNTS_VIEW, LEDGER_POST, LEDGER_VIEW

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequirePermission(ACCOUNTS_MANAGE))],
)
def create_account(
    payload: AccountCreate,
    ctx: GymContext = Depends(get_gym_context),
    service: AccountService = Depends(get_account_service),
):
    return service.create_account(ctx, **payload.model_dump())


@router.get(
    "",
    response_model=List[AccountResponse],
    dependencies=[Depends(RequirePermission(ACCOUNTS_VIEW))],
)
def list_accounts(
    active_only: bool = False,
    ctx: GymContext = Depends(get_gym_context),
    service: AccountService = Depends(get_account_service),
):
    return service.list_accounts(ctx, active_only=active_only)


@router.get(
    "/summary",
    response_model=List[AccountSummary],
    dependencies=[Depends(RequirePermission(ACCOUNTS_VIEW))],
)
def account_summary(
    start: Optional[date] = None,
    end: Optional[date] = None,
    ctx: GymContext = Depends(get_gym_context),
    service: AccountService = Depends(get_account_service),
):
    return service.account_summary(ctx, start=start, end=end)


@router.get(
    "/income-expense",
    response_model=IncomeExpenseSummary,
    dependencies=[Depends(RequirePermission(ACCOUNTS_VIEW))],
)
def income_expense_summary(
    start: date,
    end: date,
    ctx: GymContext = Depends(get_gym_context),
    service: AccountService = Depends(get_account_service),
):
    return service.income_expense_summary(ctx, start, end)


@router.get(
    "/{account_id}",
    response_model=AccountResponse,
    dependencies=[Depends(RequirePermission(ACCOUNTS_VIEW))],
)
def get_account(
    account_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: AccountService = Depends(get_account_service),
):
    return service.get_account(ctx, account_id)


@router.patch(
    "/{account_id}",
    response_model=AccountResponse,
    dependencies=[Depends(RequirePermission(ACCOUNTS_MANAGE))],
)
def update_account(
    account_id: int,
    payload: AccountUpdate,
    ctx: GymContext = Depends(get_gym_context),
    service: AccountService = Depends(get_account_service),
):
    return service.update_account(ctx, account_id, **payload.model_dump(exclude_unset=True))


@router.post(
    "/{account_id}/default",
    response_model=AccountResponse,
    dependencies=[Depends(RequirePermission(ACCOUNTS_MANAGE))],
)
def set_default_account(
    account_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: AccountService = Depends(get_account_service),
):
    return service.set_default(ctx, account_id)


@router.post(
    "/{account_id}/deactivate",
    response_model=AccountResponse,
    dependencies=[Depends(RequirePermission(ACCOUNTS_MANAGE))],
)
def deactivate_account(
    account_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: AccountService = Depends(get_account_service),
):
    return service.deactivate_account(ctx, account_id)


@router.post(
    "/{account_id}/activate",
    response_model=AccountResponse,
    dependencies=[Depends(RequirePermission(ACCOUNTS_MANAGE))],
)
def activate_account(
    account_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: AccountService = Depends(get_account_service),
):
    return service.activate_account(ctx, account_id)


@router.post(
    "/{account_id}/adjustments",
    response_model=LedgerEntryResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequirePermission(LEDGER_POST))],
)
def adjust_balance(
    account_id: int,
    payload: AdjustmentRequest,
    ctx: GymContext = Depends(get_gym_context),
    service: AccountService = Depends(get_account_service),
):
    return service.adjust_balance(
        ctx,
        account_id,
        amount=payload.amount,
        note=payload.note,
        transaction_date=payload.transaction_date,
    )


@router.get(
    "/{account_id}/ledger",
    response_model=PaginatedResponse[LedgerEntryResponse],
    dependencies=[Depends(RequirePermission(LEDGER_VIEW))],
)
def account_ledger(
    account_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
    reference_type: Optional[List[ReferenceType]] = Query(default=None),
    page: Optional[int] = Query(default=None, ge=1),
    page_size: Optional[int] = Query(default=None, ge=1),
    ctx: GymContext = Depends(get_gym_context),
    service: LedgerService = Depends(get_ledger_service),
):
    return service.ledger_for(
        ctx,
        account_id,
        start=start,
        end=end,
        reference_types=reference_type,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/{account_id}/verify",
    response_model=BalanceCheck,
    dependencies=[Depends(RequirePermission(LEDGER_VIEW))],
)
def verify_balance(
    account_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: AccountService = Depends(get_account_service),
):
    return service.verify_balance(ctx, account_id)

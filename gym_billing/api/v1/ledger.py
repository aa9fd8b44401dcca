"""Ledger entry endpoints."""

from typing import Optional

from fastapi import APIRouter, Body, Depends, status

from gym_billing.api.deps import RequirePermission, get_gym_context, get_ledger_service
from gym_billing.schemas.accounting.account import LedgerEntryResponse, ReversalRequest
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services import LedgerService
from gym_billing.services.common.permissions import LEDGER_POST, LEDGER_VIEW

router = APIRouter(prefix="/ledger", tags=["Ledger"])


@router.get(
    "/{entry_id}",
    response_model=LedgerEntryResponse,
    dependencies=[Depends(RequirePermission(LEDGER_VIEW))],
)
def get_entry(
    entry_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: LedgerService = Depends(get_ledger_service),
):
    return service.get_entry(ctx, entry_id)


@router.post(
    "/{entry_id}/reverse",
    response_model=LedgerEntryResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequirePermission(LEDGER_POST))],
)
def reverse_entry(
    entry_id: int,
    payload: Optional[ReversalRequest] = Body(default=None),
    ctx: GymContext = Depends(get_gym_context),
    service: LedgerService = Depends(get_ledger_service),
):
    description = payload.description if payload is not None else None
    return service.reverse(ctx, entry_id, description=description)

"""Subscription lifecycle endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from gym_billing.api.deps import RequirePermission, get_gym_context, get_subscription_service
from gym_billing.models.base import SubscriptionStatus
from gym_billing.schemas.common.pagination import PaginatedResponse
from gym_billing.schemas.gym.context import GymContext
from gym_billing.schemas.membership.subscription import (
    SubscriptionCancel,
    SubscriptionCreate,
    SubscriptionRenew,
    SubscriptionResponse,
    SubscriptionWithInvoice,
)
from gym_billing.services import SubscriptionService
from gym_billing.services.common.permissions import SUBSCRIPTIONS_MANAGE, SUBSCRIPTIONS_VIEW

router = APIRouter(tags=["Subscriptions"])


@router.post(
    "/subscriptions",
    response_model=SubscriptionWithInvoice,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequirePermission(SUBSCRIPTIONS_MANAGE))],
)
def create_subscription(
    payload: SubscriptionCreate,
    ctx: GymContext = Depends(get_gym_context),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Create a subscription together with its invoice."""
    return service.create_subscription(ctx, **payload.model_dump())


@router.get(
    "/subscriptions",
    response_model=PaginatedResponse[SubscriptionResponse],
    dependencies=[Depends(RequirePermission(SUBSCRIPTIONS_VIEW))],
)
def list_subscriptions(
    member_id: Optional[int] = None,
    trainer_id: Optional[int] = None,
    subscription_status: Optional[SubscriptionStatus] = Query(default=None, alias="status"),
    page: Optional[int] = Query(default=None, ge=1),
    page_size: Optional[int] = Query(default=None, ge=1),
    ctx: GymContext = Depends(get_gym_context),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.list_subscriptions(
        ctx,
        member_id=member_id,
        status=subscription_status,
        trainer_id=trainer_id,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/subscriptions/{subscription_id}",
    response_model=SubscriptionResponse,
    dependencies=[Depends(RequirePermission(SUBSCRIPTIONS_VIEW))],
)
def get_subscription(
    subscription_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.get_subscription(ctx, subscription_id)


@router.post(
    "/subscriptions/{subscription_id}/renew",
    response_model=SubscriptionWithInvoice,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequirePermission(SUBSCRIPTIONS_MANAGE))],
)
def renew_subscription(
    subscription_id: int,
    payload: SubscriptionRenew,
    ctx: GymContext = Depends(get_gym_context),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.renew_subscription(ctx, subscription_id, **payload.model_dump())


@router.post(
    "/subscriptions/{subscription_id}/cancel",
    response_model=SubscriptionResponse,
    dependencies=[Depends(RequirePermission(SUBSCRIPTIONS_MANAGE))],
)
def cancel_subscription(
    subscription_id: int,
    payload: Optional[SubscriptionCancel] = Body(default=None),
    ctx: GymContext = Depends(get_gym_context),
    service: SubscriptionService = Depends(get_subscription_service),
):
    cancel_invoice = payload.cancel_invoice if payload is not None else False
    return service.cancel_subscription(ctx, subscription_id, cancel_invoice=cancel_invoice)


@router.get(
    "/members/{member_id}/subscriptions",
    response_model=List[SubscriptionResponse],
    dependencies=[Depends(RequirePermission(SUBSCRIPTIONS_VIEW))],
)
def subscription_history(
    member_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.subscription_history(ctx, member_id)


@router.get(
    "/members/{member_id}/subscriptions/active",
    response_model=Optional[SubscriptionResponse],
    dependencies=[Depends(RequirePermission(SUBSCRIPTIONS_VIEW))],
)
def get_active_subscription(
    member_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.get_active_subscription(ctx, member_id)

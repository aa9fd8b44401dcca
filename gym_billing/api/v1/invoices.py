"""Invoice and invoice payment endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from gym_billing.api.deps import (
    RequirePermission,
    get_gym_context,
    get_invoice_service,
    get_payment_service,
)
from gym_billing.models.base import InvoiceStatus
from gym_billing.schemas.billing.invoice import (
    InvoiceCreate,
    InvoiceResponse,
    OverdueSweepResult,
    PaymentCreate,
    RevenueSummary,
    SettleInvoiceRequest,
    TransactionResponse,
)
from gym_billing.schemas.common.pagination import PaginatedResponse
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services import InvoiceService, PaymentService
from gym_billing.services.common.permissions import INVOICES_MANAGE, INVOICES_VIEW, PAYMENTS_RECORD

router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequirePermission(INVOICES_MANAGE))],
)
def create_invoice(
    payload: InvoiceCreate,
    ctx: GymContext = Depends(get_gym_context),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.create_invoice(ctx, **payload.model_dump())


@router.get(
    "",
    response_model=PaginatedResponse[InvoiceResponse],
    dependencies=[Depends(RequirePermission(INVOICES_VIEW))],
)
def list_invoices(
    member_id: Optional[int] = None,
    invoice_status: Optional[InvoiceStatus] = Query(default=None, alias="status"),
    page: Optional[int] = Query(default=None, ge=1),
    page_size: Optional[int] = Query(default=None, ge=1),
    ctx: GymContext = Depends(get_gym_context),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.list_invoices(
        ctx,
        member_id=member_id,
        status=invoice_status,
        page=page,
        page_size=page_size,
    )


@router.post(
    "/overdue-sweep",
    response_model=OverdueSweepResult,
    dependencies=[Depends(RequirePermission(INVOICES_MANAGE))],
)
def sweep_overdue(
    ctx: GymContext = Depends(get_gym_context),
    service: InvoiceService = Depends(get_invoice_service),
):
    return OverdueSweepResult(updated=service.sweep_overdue(ctx))


@router.get(
    "/revenue",
    response_model=RevenueSummary,
    dependencies=[Depends(RequirePermission(INVOICES_VIEW))],
)
def total_revenue(
    month: int,
    year: int,
    ctx: GymContext = Depends(get_gym_context),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.total_revenue(ctx, month, year)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    dependencies=[Depends(RequirePermission(INVOICES_VIEW))],
)
def get_invoice(
    invoice_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.get_invoice(ctx, invoice_id)


@router.post(
    "/{invoice_id}/cancel",
    response_model=InvoiceResponse,
    dependencies=[Depends(RequirePermission(INVOICES_MANAGE))],
)
def cancel_invoice(
    invoice_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.cancel_invoice(ctx, invoice_id)


@router.get(
    "/{invoice_id}/payments",
    response_model=List[TransactionResponse],
    dependencies=[Depends(RequirePermission(INVOICES_VIEW))],
)
def list_payments(
    invoice_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: PaymentService = Depends(get_payment_service),
):
    return service.list_payments(ctx, invoice_id)


@router.post(
    "/{invoice_id}/payments",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequirePermission(PAYMENTS_RECORD))],
)
def record_payment(
    invoice_id: int,
    payload: PaymentCreate,
    ctx: GymContext = Depends(get_gym_context),
    service: PaymentService = Depends(get_payment_service),
):
    return service.record_payment(ctx, invoice_id, **payload.model_dump())


@router.post(
    "/{invoice_id}/settle",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequirePermission(PAYMENTS_RECORD))],
)
def settle_invoice(
    invoice_id: int,
    payload: SettleInvoiceRequest,
    ctx: GymContext = Depends(get_gym_context),
    service: PaymentService = Depends(get_payment_service),
):
    return service.settle_invoice(ctx, invoice_id, **payload.model_dump())

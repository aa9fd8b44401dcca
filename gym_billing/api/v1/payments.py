"""Payment endpoints."""

from fastapi import APIRouter, Depends

from gym_billing.api.deps import RequirePermission, get_gym_context, get_payment_service
from gym_billing.schemas.billing.invoice import InvoiceResponse, TransactionResponse
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services import PaymentService
from gym_billing.services.common.permissions import INVOICES_VIEW, PAYMENTS_DELETE

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    dependencies=[Depends(RequirePermission(INVOICES_VIEW))],
)
def get_payment(
    transaction_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: PaymentService = Depends(get_payment_service),
):
    return service.get_payment(ctx, transaction_id)


@router.delete(
    "/{transaction_id}",
    response_model=InvoiceResponse,
    dependencies=[Depends(RequirePermission(PAYMENTS_DELETE))],
)
def delete_payment(
    transaction_id: int,
    ctx: GymContext = Depends(get_gym_context),
    service: PaymentService = Depends(get_payment_service),
):
    """Reverse and delete a payment; returns the invoice with its re-derived status."""
    return service.delete_payment(ctx, transaction_id)

# gym_billing/api/deps.py
"""
FastAPI dependencies.

Route handlers get their ``GymContext``, caller ``Principal`` and service
instances from here. Tests swap the session factory and clock through
``app.dependency_overrides``.
"""

from typing import Callable, Optional, Type, TypeVar

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from gym_billing.core.constants import HEADER_GYM_ID, HEADER_PERMISSIONS, HEADER_USER_ID
from gym_billing.db.session import SessionLocal
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services import (
    AccountService,
    ExpenseCategoryService,
    ExpenseService,
    GymSettingsService,
    InvoiceService,
    LedgerService,
    PaymentService,
    SalaryConfigService,
    SalarySlipService,
    SubscriptionService,
)
from gym_billing.services.base import BaseService
from gym_billing.services.common.permissions import Principal, require_permission
from gym_billing.utils.datetime_utils import Clock

TService = TypeVar("TService", bound=BaseService)


# --- Database & clock ----------------------------------------------------------

def get_session_factory() -> Callable[[], Session]:
    return SessionLocal


def get_clock() -> Optional[Clock]:
    """System clock unless overridden."""
    return None


# --- Context & caller -------------------------------------------------------------

def get_gym_context(
    gym_id: int = Header(..., alias=HEADER_GYM_ID, ge=1),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    clock: Optional[Clock] = Depends(get_clock),
) -> GymContext:
    """Build the gym context from the ``X-Gym-ID`` header and stored settings."""
    return GymSettingsService(session_factory, clock).context_for(gym_id)


def get_principal(
    permissions: Optional[str] = Header(None, alias=HEADER_PERMISSIONS),
    user_id: Optional[str] = Header(None, alias=HEADER_USER_ID),
) -> Principal:
    return Principal.from_header(permissions, user_id=user_id)


class RequirePermission:
    """
    Dependency asserting one permission.

    Usage:
        @router.post("/accounts", dependencies=[Depends(RequirePermission(ACCOUNTS_MANAGE))])
    """

    def __init__(self, permission: str):
        self.permission = permission

    def __call__(self, principal: Principal = Depends(get_principal)) -> Principal:
        require_permission(principal, self.permission)
        return principal


# --- Services ---------------------------------------------------------------------

def _service_provider(service_cls: Type[TService]) -> Callable[..., TService]:
    def provide(
        session_factory: Callable[[], Session] = Depends(get_session_factory),
        clock: Optional[Clock] = Depends(get_clock),
    ) -> TService:
        return service_cls(session_factory, clock)

    provide.__name__ = f"get_{service_cls.__name__}"
    return provide


get_account_service = _service_provider(AccountService)
get_ledger_service = _service_provider(LedgerService)
get_expense_service = _service_provider(ExpenseService)
get_expense_category_service = _service_provider(ExpenseCategoryService)
get_invoice_service = _service_provider(InvoiceService)
get_payment_service = _service_provider(PaymentService)
get_subscription_service = _service_provider(SubscriptionService)
get_salary_config_service = _service_provider(SalaryConfigService)
get_salary_slip_service = _service_provider(SalarySlipService)
get_gym_settings_service = _service_provider(GymSettingsService)


__all__ = [
    "get_session_factory",
    "get_clock",
    "get_gym_context",
    "get_principal",
    "RequirePermission",
    "get_account_service",
    "get_ledger_service",
    "get_expense_service",
    "get_expense_category_service",
    "get_invoice_service",
    "get_payment_service",
    "get_subscription_service",
    "get_salary_config_service",
    "get_salary_slip_service",
    "get_gym_settings_service",
]

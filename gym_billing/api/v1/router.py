"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints for the gym billing service
"""
from fastapi import APIRouter

from gym_billing.api.v1 import (
    accounts,
    expense_categories,
    expenses,
    gym_settings,
    invoices,
    ledger,
    payments,
    salary_slips,
    subscriptions,
    trainers,
)

router = APIRouter(
    responses={
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "State Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(accounts.router)
router.include_router(ledger.router)
router.include_router(expense_categories.router)
router.include_router(expenses.router)
router.include_router(invoices.router)
router.include_router(payments.router)
router.include_router(subscriptions.router)
router.include_router(trainers.router)
router.include_router(salary_slips.router)
router.include_router(gym_settings.router)

__all__ = ["router"]

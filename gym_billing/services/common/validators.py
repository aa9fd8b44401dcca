# gym_billing/services/common/validators.py
"""
Input validation shared by the services.

Everything here runs before a unit of work is opened, so a rejected
request never touches storage.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any

from gym_billing.core.constants import MAX_SALARY_YEAR, MIN_SALARY_YEAR, ZERO
from gym_billing.utils.money import to_money

from .errors import InvalidAmountError, InvalidPeriodError


def money(value: Any, field: str, *, allow_zero: bool = True, allow_negative: bool = False) -> Decimal:
    """
    Parse a money amount and check its sign.

    Raises:
        InvalidAmountError: If the value is not a number or has the wrong sign
    """
    try:
        amount = to_money(value)
    except ValueError as exc:
        raise InvalidAmountError(str(exc), field=field) from exc

    if amount < ZERO and not allow_negative:
        raise InvalidAmountError(f"{field} must not be negative", field=field, details={field: amount})
    if amount == ZERO and not allow_zero:
        raise InvalidAmountError(f"{field} must not be zero", field=field, details={field: amount})
    return amount


def positive_money(value: Any, field: str) -> Decimal:
    return money(value, field, allow_zero=False)


def validate_period(month: int, year: int) -> None:
    """
    Check a salary period.

    Raises:
        InvalidPeriodError: If month is outside 1..12 or year outside the supported range
    """
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Month must be between 1 and 12, got {month}", field="month")
    if not MIN_SALARY_YEAR <= year <= MAX_SALARY_YEAR:
        raise InvalidPeriodError(
            f"Year must be between {MIN_SALARY_YEAR} and {MAX_SALARY_YEAR}, got {year}",
            field="year",
        )

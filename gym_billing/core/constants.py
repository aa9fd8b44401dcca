# gym_billing/core/constants.py
from __future__ import annotations

"""
Core application constants.

Pagination defaults, HTTP header names and money precision shared by the
repositories, services and the HTTP layer.
"""

from decimal import Decimal

# Pagination defaults
DEFAULT_PAGE: int = 1
DEFAULT_PAGE_SIZE: int = 20
MAX_PAGE_SIZE: int = 100

# Money
MONEY_PLACES: Decimal = Decimal("0.01")
ZERO: Decimal = Decimal("0.00")

# Invoice numbering
INVOICE_NUMBER_PREFIX: str = "INV"

# Salary periods
MIN_SALARY_YEAR: int = 2000
MAX_SALARY_YEAR: int = 2100

# Common HTTP header names
HEADER_REQUEST_ID: str = "X-Request-ID"
HEADER_GYM_ID: str = "X-Gym-ID"
HEADER_USER_ID: str = "X-User-ID"
HEADER_PERMISSIONS: str = "X-Permissions"

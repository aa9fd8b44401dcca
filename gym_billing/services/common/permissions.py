# gym_billing/services/common/permissions.py
"""
Permission utilities.

The billing core does not authenticate anybody. Callers hand in a
``Principal`` carrying opaque permission strings and each HTTP operation
asserts the one it needs.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from .errors import PermissionDeniedError

# Grants every permission
WILDCARD = "*"

ACCOUNTS_VIEW = "accounts.view"
ACCOUNTS_MANAGE = "accounts.manage"
LEDGER_VIEW = "ledger.view"
LEDGER_POST = "ledger.post"
INVOICES_VIEW = "invoices.view"
INVOICES_MANAGE = "invoices.manage"
PAYMENTS_RECORD = "payments.record"
PAYMENTS_DELETE = "payments.delete"
SUBSCRIPTIONS_VIEW = "subscriptions.view"
SUBSCRIPTIONS_MANAGE = "subscriptions.manage"
SALARY_VIEW = "salary.view"
SALARY_MANAGE = "salary.manage"
SALARY_PAY = "salary.pay"
EXPENSES_VIEW = "expenses.view"
EXPENSES_MANAGE = "expenses.manage"
SETTINGS_MANAGE = "settings.manage"


@dataclass(frozen=True)
class Principal:
    """
    Represents the caller in the service layer.

    Attributes:
        user_id: Identifier of the caller, if known
        permissions: Set of permission strings
    """
    user_id: Optional[str] = None
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_header(cls, raw: Optional[str], user_id: Optional[str] = None) -> "Principal":
        """Build a principal from a comma separated permission list."""
        perms = frozenset(p.strip() for p in (raw or "").split(",") if p.strip())
        return cls(user_id=user_id, permissions=perms)


def has_permission(principal: Principal, permission_key: str) -> bool:
    """Check if principal has a specific permission."""
    return WILDCARD in principal.permissions or permission_key in principal.permissions



def require_permission(principal: Principal, permission_key: str) -> None:
    """
    Assert that principal has a specific permission.

    Raises:
        PermissionDeniedError: If principal lacks the permission
    """
    if not has_permission(principal, permission_key):
        raise PermissionDeniedError(permission_key)

# gym_billing/services/common/__init__.py
"""
Shared service-layer infrastructure.

- **UnitOfWork**: transaction boundary and repository factory
- **permissions**: opaque permission checks against a ``Principal``
- **mapping**: model-to-schema conversions
- **errors**: service-layer exception hierarchy
"""
from __future__ import annotations

from . import errors, mapping, permissions
from .unit_of_work import UnitOfWork

__all__ = [
    "errors",
    "mapping",
    "permissions",
    "UnitOfWork",
]

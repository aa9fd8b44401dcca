# --- File: gym_billing/schemas/common/base.py ---
"""
Base schema classes with common fields and configurations.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

__all__ = [
    "BaseSchema",
    "TimestampMixin",
    "IDMixin",
    "BaseDBSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
    "MoneyAmount",
    "NonNegativeMoney",
    "PositiveMoney",
]

# Money travels as a string in JSON so no precision is lost on the wire.
MoneyAmount = Annotated[
    Decimal,
    Field(max_digits=12, decimal_places=2),
    PlainSerializer(lambda v: f"{v:.2f}", return_type=str, when_used="json"),
]
NonNegativeMoney = Annotated[MoneyAmount, Field(ge=0)]
PositiveMoney = Annotated[MoneyAmount, Field(gt=0)]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    All application-facing schemas inherit from this so that ORM rows can be
    validated directly into response models.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        # Keep enums as Enum instances to retain full type information;
        # callers can still access `.value` if needed.
        use_enum_values=False,
        arbitrary_types_allowed=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class TimestampMixin(BaseModel):
    """Mixin for timestamp fields."""

    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")


class IDMixin(BaseModel):
    """Mixin for integer primary key."""

    id: int = Field(..., description="Unique identifier")


class BaseDBSchema(BaseSchema, IDMixin, TimestampMixin):
    """Base schema for database entities with ID and timestamps."""
    pass


class BaseCreateSchema(BaseSchema):
    """Base schema for create operations."""
    pass


class BaseUpdateSchema(BaseSchema):
    """
    Base schema for update operations.

    Note:
        Subclasses intended for partial updates declare their fields as
        Optional[...] with ``None`` defaults.
    """
    pass


class BaseResponseSchema(BaseDBSchema):
    """Base schema for API responses."""

    gym_id: int = Field(..., description="Owning gym")

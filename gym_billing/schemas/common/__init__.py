from gym_billing.schemas.common.base import (
    BaseCreateSchema,
    BaseDBSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
    MoneyAmount,
    NonNegativeMoney,
    PositiveMoney,
)
from gym_billing.schemas.common.pagination import (
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
)

__all__ = [
    "BaseSchema",
    "BaseDBSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
    "MoneyAmount",
    "NonNegativeMoney",
    "PositiveMoney",
    "PaginationParams",
    "PaginationMeta",
    "PaginatedResponse",
]

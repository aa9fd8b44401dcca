# gym_billing/services/common/mapping.py
"""
Model-Schema mapping utilities.

Conversion between ORM models and Pydantic schemas. Mapping happens
inside the unit of work so lazy attributes are still loadable.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Type, TypeVar

from pydantic import BaseModel

TSchema = TypeVar("TSchema", bound=BaseModel)


def to_schema(obj: Any, schema_cls: Type[TSchema], **extra: Any) -> TSchema:
    """
    Convert an ORM model to a Pydantic schema.

    Args:
        obj: Source ORM model instance
        schema_cls: Target Pydantic schema class
        **extra: Computed fields not present on the model

    Example:
        >>> account = to_schema(db_account, AccountResponse)
    """
    if not extra:
        return schema_cls.model_validate(obj)
    data = {column.key: getattr(obj, column.key) for column in obj.__table__.columns}
    data.update(extra)
    return schema_cls.model_validate(data)


def to_schema_list(objs: Iterable[Any], schema_cls: Type[TSchema]) -> List[TSchema]:
    """Convert a sequence of ORM models to schemas."""
    return [schema_cls.model_validate(obj) for obj in objs]

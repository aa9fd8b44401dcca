"""Money helpers. Amounts are ``Decimal`` quantized to two places."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from gym_billing.core.constants import MONEY_PLACES

Number = Union[Decimal, int, str, float]


def to_money(value: Number) -> Decimal:
    """
    Convert ``value`` to a two-place ``Decimal``.

    Floats go through ``str`` so that ``0.1`` becomes ``0.10`` rather than
    its binary expansion.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Not a money amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Not a money amount: {value!r}")
    return amount.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


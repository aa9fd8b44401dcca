"""Utility helpers."""
from gym_billing.utils.datetime_utils import Clock, DateRangeHelper, DateTimeHelper, utc_now
from gym_billing.utils.money import to_money

__all__ = [
    "Clock",
    "DateRangeHelper",
    "DateTimeHelper",
    "utc_now",
    "to_money",
]

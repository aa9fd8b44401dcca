"""
Date and time utilities for the billing core.

All stored timestamps are timezone-aware UTC. Calendar dates (due dates,
subscription periods, ledger dates) are taken in the gym's local timezone.
"""

from datetime import date, datetime, timedelta
from typing import Callable, Optional, Tuple

import pytz
from dateutil.relativedelta import relativedelta

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(pytz.UTC)


class DateTimeHelper:
    """Calendar helpers used by the services"""

    @staticmethod
    def to_timezone(dt: datetime, timezone: str) -> datetime:
        """Convert ``dt`` to ``timezone``; naive values are taken as UTC."""
        if dt.tzinfo is None:
            dt = pytz.UTC.localize(dt)
        return dt.astimezone(pytz.timezone(timezone))

    @staticmethod
    def local_date(dt: datetime, timezone: str) -> date:
        """Calendar date of ``dt`` in ``timezone``."""
        return DateTimeHelper.to_timezone(dt, timezone).date()

    @staticmethod
    def today(clock: Clock, timezone: str = "UTC") -> date:
        """Today's date in ``timezone`` according to ``clock``."""
        return DateTimeHelper.local_date(clock(), timezone)


class DateRangeHelper:
    """Month and range arithmetic"""

    @staticmethod
    def get_month_range(year: int, month: int) -> Tuple[date, date]:
        """First and last day of the month."""
        start = date(year, month, 1)
        end = start + relativedelta(months=1) - timedelta(days=1)
        return start, end

    @staticmethod
    def iter_months(start: date, end: date):
        """Yield ``(year, month)`` for every month touching [start, end]."""
        current = start.replace(day=1)
        while current <= end:
            yield current.year, current.month
            current += relativedelta(months=1)

    @staticmethod
    def clamp_range(
        start: Optional[date],
        end: Optional[date],
    ) -> Tuple[Optional[date], Optional[date]]:
        """Swap a reversed range so that ``start <= end``."""
        if start and end and start > end:
            return end, start
        return start, end

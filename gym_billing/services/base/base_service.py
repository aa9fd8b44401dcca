"""
Base service class providing common functionality for all services.
"""

from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Callable, Iterator, Optional

from sqlalchemy.orm import Session

from gym_billing.core.logging import get_logger
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services.common.errors import ServiceError
from gym_billing.services.common.unit_of_work import UnitOfWork
from gym_billing.utils.datetime_utils import Clock, DateTimeHelper, utc_now


class BaseService:
    """
    Base service with common behaviors:

    - Shared structlog logger named after the service
    - Unit-of-work factory bound to one session factory
    - Injectable clock, so "now" and "today" are testable
    - Logging of rejected operations
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        clock: Optional[Clock] = None,
    ):
        """
        Initialize base service.

        Args:
            session_factory: Factory returning new SQLAlchemy sessions
            clock: Returns the current aware UTC datetime; defaults to the system clock
        """
        self._session_factory = session_factory
        self._clock: Clock = clock or utc_now
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def unit_of_work(self) -> UnitOfWork:
        """Open a new transactional boundary."""
        return UnitOfWork(self._session_factory)

    @contextmanager
    def _operation(self, event: str, **context: Any) -> Iterator[None]:
        """Log a WARNING with the error code when the wrapped block is rejected."""
        try:
            yield
        except ServiceError as exc:
            self._logger.warning(
                f"{event}.rejected",
                error_code=exc.error_code.value,
                error_kind=exc.kind.value,
                **context,
            )
            raise

    # -------------------------------------------------------------------------
    # Time
    # -------------------------------------------------------------------------

    def _now(self) -> datetime:
        return self._clock()

    def _today(self, ctx: GymContext) -> date:
        """Today's calendar date in the gym's timezone."""
        return DateTimeHelper.today(self._clock, ctx.settings.timezone)

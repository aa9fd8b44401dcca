# gym_billing/services/common/unit_of_work.py
"""
Unit of Work pattern implementation.

Provides transaction management and repository coordination for the
service layer with SQLAlchemy. One use case runs in exactly one
``UnitOfWork``: everything it writes commits together or not at all.
"""
from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Callable, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from gym_billing.core.logging import get_logger
from gym_billing.repositories.base import BaseRepository

logger = get_logger(__name__)

TRepository = TypeVar("TRepository", bound=BaseRepository)


class UnitOfWork(AbstractContextManager["UnitOfWork"]):
    """
    Unit of Work pattern for managing database transactions.

    Coordinates repositories and ensures atomic commits/rollbacks.
    Storage errors are not wrapped: after the rollback they reach the
    caller as the original SQLAlchemy exception.

    Usage:
        >>> with UnitOfWork(session_factory) as uow:
        ...     accounts = uow.get_repo(AccountRepository)
        ...     account = accounts.find_in_gym(gym_id, account_id)
        ...     account.account_name = "Front desk cash"
        ...     # Auto-commits on __exit__ if no exception
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        auto_commit: bool = True,
        auto_flush: bool = True,
    ) -> None:
        """
        Initialize Unit of Work.

        Args:
            session_factory: Factory function that returns a new Session
            auto_commit: Whether to auto-commit on successful context exit
            auto_flush: Whether to auto-flush changes before queries
        """
        self._session_factory = session_factory
        self._auto_commit = auto_commit
        self._auto_flush = auto_flush

        self.session: Optional[Session] = None
        self._committed: bool = False
        self._rolled_back: bool = False
        self._repo_cache: dict[Type[BaseRepository], BaseRepository] = {}

    # ------------------------------------------------------------------ #
    # Context manager protocol
    # ------------------------------------------------------------------ #

    def __enter__(self) -> "UnitOfWork":
        """Enter the context and initialize session."""
        if self.session is not None:
            raise RuntimeError("UnitOfWork context already entered")

        self.session = self._session_factory()
        self.session.autoflush = self._auto_flush
        self._committed = False
        self._rolled_back = False
        self._repo_cache.clear()

        logger.debug("uow.started")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        """Exit the context and handle transaction completion."""
        if self.session is None:
            return False

        try:
            if exc_type is None:
                if self._auto_commit and not self._committed and not self._rolled_back:
                    try:
                        self.session.commit()
                        self._committed = True
                        logger.debug("uow.committed")
                    except Exception:
                        self.session.rollback()
                        self._rolled_back = True
                        logger.warning("uow.commit_failed")
                        raise
            else:
                if not self._rolled_back:
                    self.session.rollback()
                    self._rolled_back = True
                    logger.warning("uow.rolled_back", reason=exc_type.__name__)
        finally:
            self.session.close()
            self.session = None
            self._repo_cache.clear()

        # Propagate any exception
        return False

    # ------------------------------------------------------------------ #
    # Transaction control
    # ------------------------------------------------------------------ #

    def commit(self) -> None:
        """
        Explicitly commit the current transaction.

        Raises:
            RuntimeError: If called outside of context
        """
        if self.session is None:
            raise RuntimeError("UnitOfWork.commit() called outside of context")

        if self._committed:
            logger.warning("uow.commit_repeated")
            return

        if self._rolled_back:
            raise RuntimeError("Cannot commit a rolled-back transaction")

        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            self._rolled_back = True
            raise
        self._committed = True
        logger.debug("uow.committed")

    def rollback(self) -> None:
        """
        Explicitly roll back the current transaction.

        Raises:
            RuntimeError: If called outside of context
        """
        if self.session is None:
            raise RuntimeError("UnitOfWork.rollback() called outside of context")

        if self._rolled_back:
            return

        self.session.rollback()
        self._rolled_back = True
        self._committed = False
        logger.debug("uow.rolled_back", reason="explicit")

    def flush(self) -> None:
        """
        Flush pending changes to the database without committing.

        Useful for getting database-generated values (e.g., auto-increment IDs)
        and for surfacing constraint violations at a known point.
        """
        if self.session is None:
            raise RuntimeError("UnitOfWork.flush() called outside of context")
        self.session.flush()

    # ------------------------------------------------------------------ #
    # Repository factory
    # ------------------------------------------------------------------ #

    def get_repo(self, repo_cls: Type[TRepository]) -> TRepository:
        """
        Get or create a repository instance bound to this UnitOfWork's session.

        Repositories are cached per UnitOfWork instance for consistency.

        Raises:
            RuntimeError: If called outside of context
        """
        if self.session is None:
            raise RuntimeError("UnitOfWork.get_repo() called outside of context")

        if repo_cls in self._repo_cache:
            return self._repo_cache[repo_cls]  # type: ignore

        repo_instance = repo_cls(self.session)
        self._repo_cache[repo_cls] = repo_instance
        return repo_instance  # type: ignore

    # ------------------------------------------------------------------ #
    # Utility properties
    # ------------------------------------------------------------------ #

    @property
    def is_active(self) -> bool:
        """Check if the UnitOfWork is active (has an open session)."""
        return self.session is not None

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back

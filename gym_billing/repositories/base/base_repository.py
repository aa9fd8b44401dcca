"""
Base repository with standardized CRUD operations.

Provides the foundation for all domain repositories: lookups scoped to a
gym, row locking, flush-on-write and pagination. Repositories never
commit; the unit of work owns the transaction.
"""

from typing import Generic, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from gym_billing.core.logging import get_logger
from gym_billing.db.base import Base
from gym_billing.schemas.common.pagination import PaginationParams

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository for one mapped class.

    Subclasses pass their model and take only the session, so that
    ``UnitOfWork.get_repo(RepoCls)`` can build them.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db
        self._is_tenant_model = hasattr(model, "gym_id")

    # ==================== Create Operations ====================

    def add(self, entity: ModelType) -> ModelType:
        """
        Add entity and flush so that generated keys are available.

        Args:
            entity: Entity to persist

        Returns:
            The same entity, with its primary key populated
        """
        self.db.add(entity)
        self.db.flush()
        logger.debug("repository.added", model=self.model.__name__, id=getattr(entity, "id", None))
        return entity

    # ==================== Read Operations ====================

    def find_in_gym(self, gym_id: int, id: int, for_update: bool = False) -> Optional[ModelType]:
        """
        Find entity by ID within one gym.

        Args:
            gym_id: Owning gym
            id: Entity ID
            for_update: Lock the row until the transaction ends

        Returns:
            Entity or None
        """
        stmt = select(self.model).where(self.model.id == id)
        if self._is_tenant_model:
            stmt = stmt.where(self.model.gym_id == gym_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.scalars(stmt).first()

    # ==================== Delete Operations ====================

    def delete(self, entity: ModelType) -> None:
        """Hard delete entity and flush."""
        self.db.delete(entity)
        self.db.flush()

    # ==================== Count / Pagination ====================

    def count(self, stmt: Select) -> int:
        """Count rows of an arbitrary select."""
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        return self.db.scalar(count_stmt) or 0

    def paginate(
        self,
        stmt: Select,
        pagination: PaginationParams,
    ) -> Tuple[Sequence[ModelType], int]:
        """
        Paginate a select.

        Args:
            stmt: Select with ordering already applied
            pagination: Pagination parameters

        Returns:
            Tuple of (items on the page, total item count)
        """
        total = self.count(stmt)
        items = self.db.scalars(stmt.offset(pagination.offset).limit(pagination.limit)).all()
        return items, total

"""
Expense Category Service

The gym's own list of spending heads. Names are unique per gym,
ignoring case. A category that expenses point at cannot be deleted, only
deactivated.
"""

from typing import List, Optional

from gym_billing.models.accounting.expense_category import ExpenseCategory
from gym_billing.repositories.accounting import ExpenseCategoryRepository, ExpenseRepository
from gym_billing.schemas.accounting.expense import ExpenseCategoryResponse
from gym_billing.schemas.gym.context import GymContext
from gym_billing.services.base import BaseService
from gym_billing.services.common.errors import (
    ExpenseCategoryExistsError,
    ExpenseCategoryInactiveError,
    ExpenseCategoryInUseError,
    ExpenseCategoryNotFoundError,
    ValidationError,
)
from gym_billing.services.common.mapping import to_schema, to_schema_list
from gym_billing.services.common.unit_of_work import UnitOfWork


class ExpenseCategoryService(BaseService):
    def create_category(
        self,
        ctx: GymContext,
        name: str,
        description: Optional[str] = None,
    ) -> ExpenseCategoryResponse:
        """
        Add an active category.

        Raises:
            ValidationError: Blank name
            ExpenseCategoryExistsError: The gym already has a category of that name
        """
        name = self._clean_name(name)
        with self._operation("expense_category.create", gym_id=ctx.gym_id):
            with self.unit_of_work() as uow:
                categories = uow.get_repo(ExpenseCategoryRepository)
                self._ensure_unique(categories, ctx, name)
                category = categories.add(
                    ExpenseCategory(
                        gym_id=ctx.gym_id,
                        name=name,
                        description=description,
                        is_active=True,
                    )
                )
                self._logger.info(
                    "expense_category.created",
                    gym_id=ctx.gym_id,
                    category_id=category.id,
                    category_name=name,
                )
                return to_schema(category, ExpenseCategoryResponse)

    def update_category(
        self,
        ctx: GymContext,
        category_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> ExpenseCategoryResponse:
        """Rename, describe or (de)activate a category. ``None`` leaves a field as is."""
        with self._operation("expense_category.update", gym_id=ctx.gym_id, category_id=category_id):
            with self.unit_of_work() as uow:
                categories = uow.get_repo(ExpenseCategoryRepository)
                category = self.get_category_in(uow, ctx, category_id, for_update=True)
                if name is not None:
                    name = self._clean_name(name)
                    self._ensure_unique(categories, ctx, name, except_id=category.id)
                    category.name = name
                if description is not None:
                    category.description = description
                if is_active is not None:
                    category.is_active = is_active
                uow.flush()
                self._logger.info(
                    "expense_category.updated",
                    gym_id=ctx.gym_id,
                    category_id=category.id,
                    is_active=category.is_active,
                )
                return to_schema(category, ExpenseCategoryResponse)

    def delete_category(self, ctx: GymContext, category_id: int) -> None:
        """
        Remove a category no expense uses.

        Raises:
            ExpenseCategoryInUseError: At least one expense is filed under it
        """
        with self._operation("expense_category.delete", gym_id=ctx.gym_id, category_id=category_id):
            with self.unit_of_work() as uow:
                category = self.get_category_in(uow, ctx, category_id, for_update=True)
                in_use = uow.get_repo(ExpenseRepository).count_for_category(category.id)
                if in_use:
                    raise ExpenseCategoryInUseError(category_id, in_use)
                uow.get_repo(ExpenseCategoryRepository).delete(category)
                self._logger.info("expense_category.deleted", gym_id=ctx.gym_id, category_id=category_id)

    def get_category(self, ctx: GymContext, category_id: int) -> ExpenseCategoryResponse:
        with self.unit_of_work() as uow:
            return to_schema(self.get_category_in(uow, ctx, category_id), ExpenseCategoryResponse)

    def list_categories(self, ctx: GymContext, active_only: bool = False) -> List[ExpenseCategoryResponse]:
        """Categories ordered by name."""
        with self.unit_of_work() as uow:
            categories = uow.get_repo(ExpenseCategoryRepository).list_for_gym(ctx.gym_id, active_only)
            return to_schema_list(categories, ExpenseCategoryResponse)

    def list_active_categories(self, ctx: GymContext) -> List[ExpenseCategoryResponse]:
        return self.list_categories(ctx, active_only=True)

    # ==================== Composable steps ====================

    def get_category_in(
        self,
        uow: UnitOfWork,
        ctx: GymContext,
        category_id: int,
        for_update: bool = False,
    ) -> ExpenseCategory:
        category = uow.get_repo(ExpenseCategoryRepository).find_in_gym(ctx.gym_id, category_id, for_update)
        if category is None:
            raise ExpenseCategoryNotFoundError(category_id)
        return category

    def require_active_in(self, uow: UnitOfWork, ctx: GymContext, category_id: int) -> ExpenseCategory:
        """Category that may take new expenses."""
        category = self.get_category_in(uow, ctx, category_id)
        if not category.is_active:
            raise ExpenseCategoryInactiveError(category_id)
        return category

    # ==================== Internals ====================

    @staticmethod
    def _clean_name(name: Optional[str]) -> str:
        if not name or not name.strip():
            raise ValidationError("Expense category name is required", field="name")
        return name.strip()

    @staticmethod
    def _ensure_unique(
        categories: ExpenseCategoryRepository,
        ctx: GymContext,
        name: str,
        except_id: Optional[int] = None,
    ) -> None:
        existing = categories.find_by_name(ctx.gym_id, name)
        if existing is not None and existing.id != except_id:
            raise ExpenseCategoryExistsError(name, existing.id)

"""
Salary Config Service

Trainer salary terms. New terms are added as new rows so the history of
what a trainer was paid under is preserved.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from gym_billing.models.payroll.trainer_salary_config import TrainerSalaryConfig
from gym_billing.repositories.membership import TrainerRepository
from gym_billing.repositories.payroll import SalaryConfigRepository
from gym_billing.schemas.gym.context import GymContext
from gym_billing.schemas.payroll.salary import SalaryConfigResponse
from gym_billing.services.base import BaseService
from gym_billing.services.common.errors import SalaryConfigNotFoundError, TrainerNotFoundError
from gym_billing.services.common.mapping import to_schema, to_schema_list
from gym_billing.services.common.unit_of_work import UnitOfWork
from gym_billing.services.common.validators import money


class SalaryConfigService(BaseService):
    def set_config(
        self,
        ctx: GymContext,
        trainer_id: int,
        base_salary: Decimal,
        per_member_incentive: Decimal,
        effective_from: date,
    ) -> SalaryConfigResponse:
        """
        Add salary terms effective from ``effective_from``.

        Earlier terms stay in place for earlier dates. An active config with
        the same ``effective_from`` is deactivated and replaced, so at most
        one config is in force on any date.
        """
        base_salary = money(base_salary, "base_salary")
        per_member_incentive = money(per_member_incentive, "per_member_incentive")

        with self._operation("salary_config.set", gym_id=ctx.gym_id, trainer_id=trainer_id):
            with self.unit_of_work() as uow:
                if uow.get_repo(TrainerRepository).find_in_gym(ctx.gym_id, trainer_id) is None:
                    raise TrainerNotFoundError(trainer_id)

                configs = uow.get_repo(SalaryConfigRepository)
                replaced = configs.find_active_with_effective_date(ctx.gym_id, trainer_id, effective_from)
                for old in replaced:
                    old.is_active = False

                config = configs.add(
                    TrainerSalaryConfig(
                        gym_id=ctx.gym_id,
                        trainer_id=trainer_id,
                        base_salary=base_salary,
                        per_member_incentive=per_member_incentive,
                        effective_from=effective_from,
                        is_active=True,
                    )
                )
                self._logger.info(
                    "salary_config.set",
                    gym_id=ctx.gym_id,
                    trainer_id=trainer_id,
                    config_id=config.id,
                    effective_from=effective_from.isoformat(),
                    replaced=[old.id for old in replaced],
                )
                return to_schema(config, SalaryConfigResponse)

    def find_active_config_in(
        self,
        uow: UnitOfWork,
        ctx: GymContext,
        trainer_id: int,
        as_of: date,
    ) -> Optional[TrainerSalaryConfig]:
        return uow.get_repo(SalaryConfigRepository).find_active_as_of(ctx.gym_id, trainer_id, as_of)

    def get_active_config(
        self,
        ctx: GymContext,
        trainer_id: int,
        as_of: Optional[date] = None,
    ) -> SalaryConfigResponse:
        """
        Config in force for ``trainer_id`` on ``as_of`` (default: today).

        Raises:
            SalaryConfigNotFoundError: No active config starts on or before ``as_of``
        """
        as_of = as_of or self._today(ctx)
        with self.unit_of_work() as uow:
            config = self.find_active_config_in(uow, ctx, trainer_id, as_of)
            if config is None:
                raise SalaryConfigNotFoundError(
                    f"trainer {trainer_id} as of {as_of.isoformat()}",
                    {"trainer_id": trainer_id, "as_of": as_of.isoformat()},
                )
            return to_schema(config, SalaryConfigResponse)

    def deactivate_config(self, ctx: GymContext, config_id: int) -> SalaryConfigResponse:
        with self.unit_of_work() as uow:
            config = uow.get_repo(SalaryConfigRepository).find_in_gym(ctx.gym_id, config_id, for_update=True)
            if config is None:
                raise SalaryConfigNotFoundError(config_id)
            config.is_active = False
            uow.flush()
            self._logger.info("salary_config.deactivated", gym_id=ctx.gym_id, config_id=config_id)
            return to_schema(config, SalaryConfigResponse)

    def config_history(self, ctx: GymContext, trainer_id: int) -> List[SalaryConfigResponse]:
        """All configs of a trainer, newest ``effective_from`` first."""
        with self.unit_of_work() as uow:
            if uow.get_repo(TrainerRepository).find_in_gym(ctx.gym_id, trainer_id) is None:
                raise TrainerNotFoundError(trainer_id)
            return to_schema_list(
                uow.get_repo(SalaryConfigRepository).history(ctx.gym_id, trainer_id),
                SalaryConfigResponse,
            )

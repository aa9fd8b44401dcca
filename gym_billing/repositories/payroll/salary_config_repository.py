"""Trainer salary config repository."""

from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from gym_billing.models.payroll.trainer_salary_config import TrainerSalaryConfig
from gym_billing.repositories.base.base_repository import BaseRepository


class SalaryConfigRepository(BaseRepository[TrainerSalaryConfig]):
    def __init__(self, session: Session):
        super().__init__(TrainerSalaryConfig, session)

    def find_active_as_of(
        self,
        gym_id: int,
        trainer_id: int,
        as_of: date,
    ) -> Optional[TrainerSalaryConfig]:
        """Active config with the latest ``effective_from`` on or before ``as_of``."""
        stmt = (
            select(TrainerSalaryConfig)
            .where(
                TrainerSalaryConfig.gym_id == gym_id,
                TrainerSalaryConfig.trainer_id == trainer_id,
                TrainerSalaryConfig.is_active.is_(True),
                TrainerSalaryConfig.effective_from <= as_of,
            )
            .order_by(TrainerSalaryConfig.effective_from.desc(), TrainerSalaryConfig.id.desc())
            .limit(1)
        )
        return self.db.scalars(stmt).first()

    def find_active_with_effective_date(
        self,
        gym_id: int,
        trainer_id: int,
        effective_from: date,
    ) -> List[TrainerSalaryConfig]:
        stmt = (
            select(TrainerSalaryConfig)
            .where(
                TrainerSalaryConfig.gym_id == gym_id,
                TrainerSalaryConfig.trainer_id == trainer_id,
                TrainerSalaryConfig.is_active.is_(True),
                TrainerSalaryConfig.effective_from == effective_from,
            )
            .with_for_update()
        )
        return list(self.db.scalars(stmt))

    def history(self, gym_id: int, trainer_id: int) -> List[TrainerSalaryConfig]:
        stmt = (
            select(TrainerSalaryConfig)
            .where(
                TrainerSalaryConfig.gym_id == gym_id,
                TrainerSalaryConfig.trainer_id == trainer_id,
            )
            .order_by(TrainerSalaryConfig.effective_from.desc(), TrainerSalaryConfig.id.desc())
        )
        return list(self.db.scalars(stmt))

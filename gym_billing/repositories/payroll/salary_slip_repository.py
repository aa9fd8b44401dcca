"""Trainer salary slip repository."""

from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy import Select, exists, func, select
from sqlalchemy.orm import Session

from gym_billing.models.base import PaymentStatus
from gym_billing.models.payroll.trainer_salary_slip import TrainerSalarySlip
from gym_billing.repositories.base.base_repository import BaseRepository
from gym_billing.utils.money import to_money


class SalarySlipRepository(BaseRepository[TrainerSalarySlip]):
    def __init__(self, session: Session):
        super().__init__(TrainerSalarySlip, session)

    def find_for_period(
        self,
        gym_id: int,
        trainer_id: int,
        month: int,
        year: int,
    ) -> Optional[TrainerSalarySlip]:
        stmt = select(TrainerSalarySlip).where(
            TrainerSalarySlip.gym_id == gym_id,
            TrainerSalarySlip.trainer_id == trainer_id,
            TrainerSalarySlip.month == month,
            TrainerSalarySlip.year == year,
        )
        return self.db.scalars(stmt).first()

    def exists_for_period(self, gym_id: int, trainer_id: int, month: int, year: int) -> bool:
        stmt = select(
            exists().where(
                TrainerSalarySlip.gym_id == gym_id,
                TrainerSalarySlip.trainer_id == trainer_id,
                TrainerSalarySlip.month == month,
                TrainerSalarySlip.year == year,
            )
        )
        return bool(self.db.scalar(stmt))

    def _filtered(
        self,
        stmt: Select,
        gym_id: int,
        trainer_id: Optional[int],
        month: Optional[int],
        year: Optional[int],
        payment_status: Optional[PaymentStatus],
    ) -> Select:
        stmt = stmt.where(TrainerSalarySlip.gym_id == gym_id)
        if trainer_id is not None:
            stmt = stmt.where(TrainerSalarySlip.trainer_id == trainer_id)
        if month is not None:
            stmt = stmt.where(TrainerSalarySlip.month == month)
        if year is not None:
            stmt = stmt.where(TrainerSalarySlip.year == year)
        if payment_status is not None:
            stmt = stmt.where(TrainerSalarySlip.payment_status == payment_status)
        return stmt

    def search_query(
        self,
        gym_id: int,
        trainer_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> Select:
        stmt = self._filtered(
            select(TrainerSalarySlip), gym_id, trainer_id, month, year, payment_status
        )
        return stmt.order_by(
            TrainerSalarySlip.year.desc(),
            TrainerSalarySlip.month.desc(),
            TrainerSalarySlip.id,
        )

    def summary(
        self,
        gym_id: int,
        trainer_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> Dict[str, object]:
        """Payout totals over the matching slips."""
        stmt = self._filtered(
            select(
                func.coalesce(func.sum(TrainerSalarySlip.gross_salary), 0),
                func.coalesce(func.sum(TrainerSalarySlip.incentive_total), 0),
                func.coalesce(func.sum(TrainerSalarySlip.base_salary), 0),
                func.count(TrainerSalarySlip.id),
            ),
            gym_id,
            trainer_id,
            month,
            year,
            payment_status,
        )
        gross, incentives, base, count = self.db.execute(stmt).one()
        return {
            "total_salary_payout": to_money(gross),
            "total_incentives": to_money(incentives),
            "total_base_salary": to_money(base),
            "slip_count": int(count or 0),
        }

"""
Salary Slip Service

Monthly trainer salary slips. A slip is a snapshot of the config in force
at the end of the month and of the number of members the trainer had that
month. Figures never change after generation; only the payment status
moves, and every move posts to (or reverses from) the ledger in the same
unit of work.

A slip is unique per (trainer, month, year). The database constraint is
what enforces it: the existence check before the insert only gives a
friendlier error in the common case.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError

from gym_billing.core.constants import ZERO
from gym_billing.core.pagination import normalize_pagination, paginate_items
from gym_billing.models.base import PaymentStatus, ReferenceType
from gym_billing.models.payroll.trainer_salary_slip import TrainerSalarySlip
from gym_billing.repositories.membership import SubscriptionRepository, TrainerRepository
from gym_billing.repositories.payroll import SalarySlipRepository
from gym_billing.schemas.common.pagination import PaginatedResponse
from gym_billing.schemas.gym.context import GymContext
from gym_billing.schemas.payroll.salary import (
    ActiveMemberCount,
    BatchGenerationResult,
    SalarySlipResponse,
    SalarySlipSummary,
)
from gym_billing.services.accounting.ledger_service import LedgerService
from gym_billing.services.base import BaseService
from gym_billing.services.common.errors import (
    AlreadyPaidError,
    NoSalaryConfigError,
    NotPaidError,
    SalarySlipNotFoundError,
    SlipAlreadyExistsError,
    TrainerNotFoundError,
)
from gym_billing.services.common.mapping import to_schema
from gym_billing.services.common.unit_of_work import UnitOfWork
from gym_billing.services.common.validators import validate_period
from gym_billing.services.payroll.salary_config_service import SalaryConfigService
from gym_billing.utils.datetime_utils import DateRangeHelper


class SalarySlipService(BaseService):
    """Generation and payment of trainer salary slips."""

    def __init__(self, session_factory, clock=None):
        super().__init__(session_factory, clock)
        self.ledger = LedgerService(session_factory, clock)
        self.configs = SalaryConfigService(session_factory, clock)

    # ==================== Active members ====================

    def get_active_member_count(
        self,
        ctx: GymContext,
        trainer_id: int,
        month: int,
        year: int,
    ) -> ActiveMemberCount:
        """
        Distinct members trained by ``trainer_id`` during the month.

        A member counts once if any Active or Expired subscription with this
        trainer overlaps the month, however many there are.
        """
        validate_period(month, year)
        with self.unit_of_work() as uow:
            if uow.get_repo(TrainerRepository).find_in_gym(ctx.gym_id, trainer_id) is None:
                raise TrainerNotFoundError(trainer_id)
            count = self.count_active_members_in(uow, ctx, trainer_id, month, year)
        return ActiveMemberCount(trainer_id=trainer_id, month=month, year=year, active_member_count=count)

    @staticmethod
    def count_active_members_in(
        uow: UnitOfWork,
        ctx: GymContext,
        trainer_id: int,
        month: int,
        year: int,
    ) -> int:
        month_start, month_end = DateRangeHelper.get_month_range(year, month)
        return uow.get_repo(SubscriptionRepository).count_members_for_trainer(
            ctx.gym_id, trainer_id, month_start, month_end
        )

    # ==================== Generation ====================

    def generate_salary_slip(
        self,
        ctx: GymContext,
        trainer_id: int,
        month: int,
        year: int,
    ) -> SalarySlipResponse:
        """
        Generate the slip for one trainer and month.

        Raises:
            InvalidPeriodError: Month or year out of range
            TrainerNotFoundError: Unknown trainer
            SlipAlreadyExistsError: A slip exists for the period (never overwritten)
            NoSalaryConfigError: No config in force at the end of the month
        """
        validate_period(month, year)
        with self._operation(
            "salary_slip.generate", gym_id=ctx.gym_id, trainer_id=trainer_id, month=month, year=year
        ):
            with self.unit_of_work() as uow:
                slip = self.generate_salary_slip_in(uow, ctx, trainer_id, month, year)
                return to_schema(slip, SalarySlipResponse)

    def generate_salary_slip_in(
        self,
        uow: UnitOfWork,
        ctx: GymContext,
        trainer_id: int,
        month: int,
        year: int,
    ) -> TrainerSalarySlip:
        if uow.get_repo(TrainerRepository).find_in_gym(ctx.gym_id, trainer_id) is None:
            raise TrainerNotFoundError(trainer_id)

        slips = uow.get_repo(SalarySlipRepository)
        if slips.exists_for_period(ctx.gym_id, trainer_id, month, year):
            raise SlipAlreadyExistsError(trainer_id, month, year)

        _, month_end = DateRangeHelper.get_month_range(year, month)
        config = self.configs.find_active_config_in(uow, ctx, trainer_id, month_end)
        if config is None:
            raise NoSalaryConfigError(trainer_id, month, year)

        active_members = self.count_active_members_in(uow, ctx, trainer_id, month, year)
        incentive_total = config.per_member_incentive * active_members
        slip = TrainerSalarySlip(
            gym_id=ctx.gym_id,
            trainer_id=trainer_id,
            month=month,
            year=year,
            base_salary=config.base_salary,
            active_member_count=active_members,
            per_member_incentive=config.per_member_incentive,
            incentive_total=incentive_total,
            gross_salary=config.base_salary + incentive_total,
            payment_status=PaymentStatus.UNPAID,
            generated_at=self._now(),
        )
        try:
            slips.add(slip)
        except IntegrityError as exc:
            # A failed flush leaves the transaction unusable
            uow.rollback()
            if slips.find_for_period(ctx.gym_id, trainer_id, month, year) is None:
                raise
            # Lost a race with a concurrent generation for the same period
            raise SlipAlreadyExistsError(trainer_id, month, year) from exc

        self._logger.info(
            "salary_slip.generated",
            gym_id=ctx.gym_id,
            slip_id=slip.id,
            trainer_id=trainer_id,
            month=month,
            year=year,
            active_member_count=active_members,
            gross_salary=str(slip.gross_salary),
        )
        return slip

    def generate_for_all(self, ctx: GymContext, month: int, year: int) -> BatchGenerationResult:
        """
        Generate slips for every active trainer.

        Each trainer gets its own unit of work, so one trainer's failure
        does not undo another's slip. Trainers that already have a slip or
        have no config are reported and skipped.
        """
        validate_period(month, year)
        with self.unit_of_work() as uow:
            trainer_ids = [t.id for t in uow.get_repo(TrainerRepository).list_active(ctx.gym_id)]

        result = BatchGenerationResult(month=month, year=year)
        for trainer_id in trainer_ids:
            try:
                result.generated.append(self.generate_salary_slip(ctx, trainer_id, month, year))
            except SlipAlreadyExistsError:
                result.skipped_existing.append(trainer_id)
            except NoSalaryConfigError:
                result.skipped_no_config.append(trainer_id)

        self._logger.info(
            "salary_slip.batch_generated",
            gym_id=ctx.gym_id,
            month=month,
            year=year,
            generated=len(result.generated),
            skipped_existing=len(result.skipped_existing),
            skipped_no_config=len(result.skipped_no_config),
        )
        return result

    # ==================== Payment ====================

    def mark_as_paid(self, ctx: GymContext, slip_id: int, account_id: int) -> SalarySlipResponse:
        """
        Pay a slip from ``account_id``: debit the gross salary and mark it Paid.

        Raises:
            SalarySlipNotFoundError: Unknown slip
            AlreadyPaidError: The slip is already Paid
        """
        with self._operation("salary_slip.pay", gym_id=ctx.gym_id, slip_id=slip_id):
            with self.unit_of_work() as uow:
                slip = self._get(uow, ctx, slip_id, for_update=True)
                if slip.payment_status is PaymentStatus.PAID:
                    raise AlreadyPaidError(slip.id)

                entry_id = None
                if slip.gross_salary > ZERO:
                    entry = self.ledger.post_in(
                        uow,
                        ctx,
                        account_id=account_id,
                        reference_type=ReferenceType.SALARY_PAYMENT,
                        reference_id=slip.id,
                        debit=slip.gross_salary,
                        description=f"Salary {slip.month:02d}/{slip.year} trainer {slip.trainer_id}",
                    )
                    entry_id = entry.id
                else:
                    self.ledger.lock_account_in(uow, ctx, account_id)

                slip.payment_status = PaymentStatus.PAID
                slip.paid_at = self._now()
                slip.paid_account_id = account_id
                slip.ledger_entry_id = entry_id
                uow.flush()

                self._logger.info(
                    "salary_slip.paid",
                    gym_id=ctx.gym_id,
                    slip_id=slip.id,
                    account_id=account_id,
                    ledger_entry_id=entry_id,
                    amount=str(slip.gross_salary),
                )
                return to_schema(slip, SalarySlipResponse)

    def mark_as_unpaid(self, ctx: GymContext, slip_id: int) -> SalarySlipResponse:
        """
        Undo a salary payment by reversing its ledger debit.

        Raises:
            NotPaidError: The slip is not Paid
        """
        with self._operation("salary_slip.unpay", gym_id=ctx.gym_id, slip_id=slip_id):
            with self.unit_of_work() as uow:
                slip = self._get(uow, ctx, slip_id, for_update=True)
                if slip.payment_status is not PaymentStatus.PAID:
                    raise NotPaidError(slip.id)

                reversal_id = None
                if slip.ledger_entry_id is not None:
                    reversal = self.ledger.reverse_in(
                        uow,
                        ctx,
                        slip.ledger_entry_id,
                        description=f"Salary payment for slip {slip.id} undone",
                    )
                    reversal_id = reversal.id

                slip.payment_status = PaymentStatus.UNPAID
                slip.paid_at = None
                slip.paid_account_id = None
                slip.ledger_entry_id = None
                uow.flush()

                self._logger.info(
                    "salary_slip.unpaid",
                    gym_id=ctx.gym_id,
                    slip_id=slip.id,
                    reversal_entry_id=reversal_id,
                )
                return to_schema(slip, SalarySlipResponse)

    # ==================== Queries ====================

    def get_slip(self, ctx: GymContext, slip_id: int) -> SalarySlipResponse:
        with self.unit_of_work() as uow:
            return to_schema(self._get(uow, ctx, slip_id), SalarySlipResponse)

    def list_slips(
        self,
        ctx: GymContext,
        trainer_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        payment_status: Optional[PaymentStatus] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> PaginatedResponse[SalarySlipResponse]:
        params = normalize_pagination(page, page_size)
        with self.unit_of_work() as uow:
            slips = uow.get_repo(SalarySlipRepository)
            stmt = slips.search_query(ctx.gym_id, trainer_id, month, year, payment_status)
            items, total = slips.paginate(stmt, params)
            return paginate_items(
                items=items,
                total_items=total,
                params=params,
                mapper=lambda s: to_schema(s, SalarySlipResponse),
            )

    def slip_summary(
        self,
        ctx: GymContext,
        trainer_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> SalarySlipSummary:
        """Totals over the matching slips."""
        with self.unit_of_work() as uow:
            totals = uow.get_repo(SalarySlipRepository).summary(
                ctx.gym_id, trainer_id, month, year, payment_status
            )
        return SalarySlipSummary(**totals)

    @staticmethod
    def _get(uow: UnitOfWork, ctx: GymContext, slip_id: int, for_update: bool = False) -> TrainerSalarySlip:
        slip = uow.get_repo(SalarySlipRepository).find_in_gym(ctx.gym_id, slip_id, for_update)
        if slip is None:
            raise SalarySlipNotFoundError(slip_id)
        return slip

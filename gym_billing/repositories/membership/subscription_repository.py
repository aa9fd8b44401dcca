"""Subscription repository."""

from datetime import date
from typing import List, Optional

from sqlalchemy import Select, distinct, func, select
from sqlalchemy.orm import Session

from gym_billing.models.base import SubscriptionStatus
from gym_billing.models.membership.subscription import Subscription
from gym_billing.repositories.base.base_repository import BaseRepository

# Statuses that mean the member was really enrolled for the period
COUNTED_STATUSES = (SubscriptionStatus.ACTIVE, SubscriptionStatus.EXPIRED)


class SubscriptionRepository(BaseRepository[Subscription]):
    def __init__(self, session: Session):
        super().__init__(Subscription, session)

    def search_query(
        self,
        gym_id: int,
        member_id: Optional[int] = None,
        status: Optional[SubscriptionStatus] = None,
        trainer_id: Optional[int] = None,
    ) -> Select:
        stmt = select(Subscription).where(Subscription.gym_id == gym_id)
        if member_id is not None:
            stmt = stmt.where(Subscription.member_id == member_id)
        if status is not None:
            stmt = stmt.where(Subscription.status == status)
        if trainer_id is not None:
            stmt = stmt.where(Subscription.trainer_id == trainer_id)
        return stmt.order_by(Subscription.start_date.desc(), Subscription.id.desc())

    def history_for_member(self, gym_id: int, member_id: int) -> List[Subscription]:
        stmt = (
            select(Subscription)
            .where(Subscription.gym_id == gym_id, Subscription.member_id == member_id)
            .order_by(Subscription.start_date, Subscription.id)
        )
        return list(self.db.scalars(stmt))

    def active_for_member(self, gym_id: int, member_id: int) -> Optional[Subscription]:
        """Active subscription with the latest start, or None."""
        stmt = (
            select(Subscription)
            .where(
                Subscription.gym_id == gym_id,
                Subscription.member_id == member_id,
                Subscription.status == SubscriptionStatus.ACTIVE,
            )
            .order_by(Subscription.start_date.desc(), Subscription.id.desc())
            .limit(1)
        )
        return self.db.scalars(stmt).first()

    def count_members_for_trainer(
        self,
        gym_id: int,
        trainer_id: int,
        period_start: date,
        period_end: date,
    ) -> int:
        """
        Distinct members with a counted subscription under ``trainer_id``
        whose period intersects ``[period_start, period_end]``.
        """
        stmt = select(func.count(distinct(Subscription.member_id))).where(
            Subscription.gym_id == gym_id,
            Subscription.trainer_id == trainer_id,
            Subscription.status.in_(COUNTED_STATUSES),
            Subscription.start_date <= period_end,
            Subscription.end_date >= period_start,
        )
        return self.db.scalar(stmt) or 0

"""Roster lookups for members, trainers and packages."""

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from gym_billing.models.membership.member import Member
from gym_billing.models.membership.package import Package
from gym_billing.models.membership.trainer import Trainer
from gym_billing.repositories.base.base_repository import BaseRepository


class MemberRepository(BaseRepository[Member]):
    def __init__(self, session: Session):
        super().__init__(Member, session)


class PackageRepository(BaseRepository[Package]):
    def __init__(self, session: Session):
        super().__init__(Package, session)


class TrainerRepository(BaseRepository[Trainer]):
    def __init__(self, session: Session):
        super().__init__(Trainer, session)

    def list_active(self, gym_id: int) -> List[Trainer]:
        stmt = (
            select(Trainer)
            .where(Trainer.gym_id == gym_id, Trainer.is_active.is_(True))
            .order_by(Trainer.id)
        )
        return list(self.db.scalars(stmt))

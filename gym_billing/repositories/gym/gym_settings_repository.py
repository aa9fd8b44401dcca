"""Gym settings repository."""

from typing import Optional

from sqlalchemy.orm import Session

from gym_billing.models.gym.gym_settings import GymSettingsRecord
from gym_billing.repositories.base.base_repository import BaseRepository


class GymSettingsRepository(BaseRepository[GymSettingsRecord]):
    def __init__(self, session: Session):
        super().__init__(GymSettingsRecord, session)

    def find_for_gym(self, gym_id: int) -> Optional[GymSettingsRecord]:
        return self.db.get(GymSettingsRecord, gym_id)

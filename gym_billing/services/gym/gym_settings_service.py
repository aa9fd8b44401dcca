"""
Gym Settings Service

Per-gym billing settings. Gyms without a stored row run on the
application defaults from ``Settings``.
"""

from pydantic import ValidationError as PydanticValidationError

from gym_billing.models.gym.gym_settings import GymSettingsRecord
from gym_billing.repositories.gym import GymSettingsRepository
from gym_billing.schemas.gym.context import GymContext, GymSettings, GymSettingsUpdate
from gym_billing.services.base import BaseService
from gym_billing.services.common.errors import ValidationError


class GymSettingsService(BaseService):
    def get(self, gym_id: int) -> GymSettings:
        with self.unit_of_work() as uow:
            record = uow.get_repo(GymSettingsRepository).find_for_gym(gym_id)
            if record is None:
                return GymSettings()
            return GymSettings.model_validate(record)

    def context_for(self, gym_id: int) -> GymContext:
        """Build the context every service operation runs with."""
        return GymContext(gym_id=gym_id, settings=self.get(gym_id))

    def update(self, gym_id: int, **changes) -> GymSettings:
        """
        Apply a partial update and store the full settings row.

        Fields not given keep their current value (stored or default).
        Accepted fields are those of ``GymSettingsUpdate``.

        Raises:
            ValidationError: The merged settings are invalid, e.g. an unknown timezone
        """
        with self._operation("gym_settings.update", gym_id=gym_id):
            with self.unit_of_work() as uow:
                repo = uow.get_repo(GymSettingsRepository)
                record = repo.find_for_gym(gym_id)
                current = GymSettings.model_validate(record) if record is not None else GymSettings()

                try:
                    update_data = GymSettingsUpdate(**changes).model_dump(exclude_unset=True, exclude_none=True)
                    merged = GymSettings(**{**current.model_dump(), **update_data})
                except PydanticValidationError as exc:
                    raise ValidationError(
                        "Invalid gym settings",
                        details={"errors": [err["msg"] for err in exc.errors()]},
                    ) from exc

                if record is None:
                    record = repo.add(GymSettingsRecord(gym_id=gym_id, **merged.model_dump()))
                else:
                    for key, value in merged.model_dump().items():
                        setattr(record, key, value)
                uow.flush()

                self._logger.info(
                    "gym_settings.updated",
                    gym_id=gym_id,
                    changed=sorted(update_data),
                )
                return merged

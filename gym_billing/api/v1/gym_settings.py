"""Per-gym settings endpoints."""

from fastapi import APIRouter, Depends, Header

from gym_billing.api.deps import RequirePermission, get_gym_settings_service
from gym_billing.core.constants import HEADER_GYM_ID
from gym_billing.schemas.gym.context import GymSettings, GymSettingsUpdate
from gym_billing.services import GymSettingsService
from gym_billing.services.common.permissions import SETTINGS_MANAGE

router = APIRouter(prefix="/settings", tags=["Gym Settings"])


@router.get("", response_model=GymSettings)
def get_settings(
    gym_id: int = Header(..., alias=HEADER_GYM_ID, ge=1),
    service: GymSettingsService = Depends(get_gym_settings_service),
):
    return service.get(gym_id)


@router.patch(
    "",
    response_model=GymSettings,
    dependencies=[Depends(RequirePermission(SETTINGS_MANAGE))],
)
def update_settings(
    payload: GymSettingsUpdate,
    gym_id: int = Header(..., alias=HEADER_GYM_ID, ge=1),
    service: GymSettingsService = Depends(get_gym_settings_service),
):
    return service.update(gym_id, **payload.model_dump(exclude_unset=True))

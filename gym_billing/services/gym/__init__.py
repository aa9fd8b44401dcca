from gym_billing.services.gym.gym_settings_service import GymSettingsService

__all__ = ["GymSettingsService"]

from gym_billing.repositories.gym.gym_settings_repository import GymSettingsRepository

__all__ = ["GymSettingsRepository"]

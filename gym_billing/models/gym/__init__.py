from gym_billing.models.gym.gym_settings import GymSettingsRecord

__all__ = ["GymSettingsRecord"]

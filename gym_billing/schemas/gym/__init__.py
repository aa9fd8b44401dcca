from gym_billing.schemas.gym.context import GymContext, GymSettings, GymSettingsUpdate

__all__ = ["GymContext", "GymSettings", "GymSettingsUpdate"]

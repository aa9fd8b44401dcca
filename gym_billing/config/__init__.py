"""
Configuration package for the gym billing service.

Holds the environment-driven settings shared by the database layer,
logging and the HTTP application.
"""

from gym_billing.config.settings import Settings, get_settings, settings

__all__ = ['Settings', 'get_settings', 'settings']

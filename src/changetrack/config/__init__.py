"""Configuration module using Pydantic Settings.

Usage:
    from changetrack.config import get_settings

    settings = get_settings()
    settings.log_history
"""

from changetrack.config.settings import ChangeTrackingSettings, get_settings, reset_settings

__all__ = [
    "ChangeTrackingSettings",
    "get_settings",
    "reset_settings",
]

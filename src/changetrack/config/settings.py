"""Configuration settings using Pydantic Settings.

Provides typed defaults for proxy generation and tracker handles, with
environment variable support.

Usage:
    from changetrack.config import ChangeTrackingSettings, get_settings

    # Load from environment variables (CHANGETRACK_*)
    settings = get_settings()

    # Or override with explicit values
    settings = ChangeTrackingSettings(log_history=True)
"""

from __future__ import annotations

from functools import cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from changetrack.storage.models import AccessMode


class ChangeTrackingSettings(BaseSettings):  # type: ignore[misc]
    """Defaults for proxy generation and tracker handles.

    Attributes:
        log_history: History flag used when callers pass ``log_history=None``.
        tracker_access_mode: Mode of handles returned by get_tracker() when no
            mode is given. READ_WRITE is rejected, as it would let callers
            write through the store directly. TrackedInstance trackers are
            always READ_ONLY.
        proxy_name_suffix: Appended to the base class name for generated
            proxy classes. Empty keeps the base name.

    Environment Variables:
        CHANGETRACK_LOG_HISTORY
        CHANGETRACK_TRACKER_ACCESS_MODE (no_set or read_only)
        CHANGETRACK_PROXY_NAME_SUFFIX
    """

    model_config = SettingsConfigDict(
        env_prefix="CHANGETRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_history: bool = False
    tracker_access_mode: AccessMode = AccessMode.NO_SET
    proxy_name_suffix: str = ""

    @field_validator("tracker_access_mode")
    @classmethod
    def _reject_writable_trackers(cls, mode: AccessMode) -> AccessMode:
        if mode is AccessMode.READ_WRITE:
            raise ValueError("tracker_access_mode must be no_set or read_only")
        return mode


@cache
def get_settings() -> ChangeTrackingSettings:
    """Return the process-wide settings, loading them on first use."""
    return ChangeTrackingSettings()


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() reloads the environment."""
    get_settings.cache_clear()

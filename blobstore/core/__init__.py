"""Core: config, constants, and settings providers.

Single place for settings and shared constants.
"""

from blobstore.core.config import Settings, get_settings
from blobstore.core.settings_provider import (
    EnvironmentSettingsProvider,
    SettingsProvider,
    StaticSettingsProvider,
)

__all__ = [
    "EnvironmentSettingsProvider",
    "Settings",
    "SettingsProvider",
    "StaticSettingsProvider",
    "get_settings",
]

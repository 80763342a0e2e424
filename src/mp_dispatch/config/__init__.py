"""Config – 12-factor settings and loaders."""

from mp_dispatch.config.dispatch import DispatchSettings
from mp_dispatch.config.settings import EnvSettingsLoader, Settings, SettingsLoader
from mp_dispatch.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "ConfigError",
    "DispatchSettings",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]

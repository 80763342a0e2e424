"""Config settings – 12-factor env-based configuration."""
from mp_dispatch.config.settings.base import Settings
from mp_dispatch.config.settings.loaders import EnvSettingsLoader, SettingsLoader

__all__ = ["EnvSettingsLoader", "Settings", "SettingsLoader"]

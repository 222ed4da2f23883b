"""Config – 12-factor settings and loaders."""

from datafilter.config.settings import DataFilterSettings, EnvSettingsLoader, Settings, SettingsLoader
from datafilter.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "ConfigError",
    "DataFilterSettings",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]

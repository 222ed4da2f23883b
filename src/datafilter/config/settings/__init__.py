"""Config settings – 12-factor env-based configuration."""
from datafilter.config.settings.base import Settings
from datafilter.config.settings.datafilter import DataFilterSettings
from datafilter.config.settings.loaders import EnvSettingsLoader, SettingsLoader

__all__ = ["DataFilterSettings", "EnvSettingsLoader", "Settings", "SettingsLoader"]

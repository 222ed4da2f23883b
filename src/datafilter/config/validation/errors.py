"""Config validation – errors raised while loading DataFilterSettings."""
from datafilter.kernel.errors import ApplicationError


class ConfigError(ApplicationError):
    """Startup settings could not be loaded or are inconsistent."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """A settings field without a default has no ``DATAFILTER_*`` variable."""
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(f"No value for required setting '{setting_name}'")
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting parsed fine but is out of range, e.g. an unknown log level."""
    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(f"Rejected {value!r} for setting '{setting_name}' ({reason})")
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]

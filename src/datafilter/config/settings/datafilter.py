"""Config settings – DataFilterSettings."""
from __future__ import annotations

import dataclasses
import logging

from datafilter.config.settings.base import Settings
from datafilter.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class DataFilterSettings(Settings):
    """Startup configuration, read from ``DATAFILTER_*`` environment variables.

    ``strict_mode`` is the fallback used when the ``datafilter.strictMode``
    global property is unset; a stored property always wins.
    ``disabled_filters`` names filters switched off at startup.
    With ``configure_logging`` set, :meth:`DataFilter.install` configures
    JSON logging at ``log_level``; leave it off when the host application
    configures logging itself.
    """

    _prefix: dataclasses.ClassVar[str] = "DATAFILTER"

    strict_mode: bool = True
    disabled_filters: list[str] = dataclasses.field(default_factory=list)
    log_level: str = "INFO"
    configure_logging: bool = False
    audit_service: str = "datafilter"

    def _validate(self) -> None:
        if logging.getLevelName(self.log_level.upper()) == f"Level {self.log_level.upper()}":
            raise InvalidSettingValueError("log_level", self.log_level, "unknown logging level")

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level.upper())


__all__ = ["DataFilterSettings"]

"""Configuration models."""

from ._common import LogFormat, LogLevel
from ._logging import LoggingConfig
from ._settings import Settings

__all__ = ["LogFormat", "LogLevel", "LoggingConfig", "Settings"]

"""gitprompt settings.

Example:
    >>> from gitprompt.config import load_settings
    >>> settings = load_settings({"GITPROMPT_LOG_LEVEL": "debug"})
    >>> settings.logging.level
    <LogLevel.DEBUG: 'debug'>
"""

from gitprompt.exceptions import ConfigError, ConfigLoadError

from ._load import ENV_PREFIX, load_settings, read_env_values, safe_load_settings
from ._models import LogFormat, LoggingConfig, LogLevel, Settings

__all__ = [
    "ENV_PREFIX",
    "ConfigError",
    "ConfigLoadError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "Settings",
    "load_settings",
    "read_env_values",
    "safe_load_settings",
]

"""Settings loading from the environment."""

import os
import sys
from collections.abc import Mapping
from typing import Final

from pydantic import ValidationError

from gitprompt.config._models import Settings
from gitprompt.exceptions import ConfigLoadError

ENV_PREFIX: Final = "GITPROMPT_"

# Environment variable suffix -> (section, key)
_ENV_KEYS: Final[Mapping[str, tuple[str, str]]] = {
    "LOG_FILE": ("logging", "file"),
    "LOG_LEVEL": ("logging", "level"),
    "LOG_FORMAT": ("logging", "format"),
}


def read_env_values(environ: Mapping[str, str] | None = None) -> dict[str, object]:
    """Collect settings values from GITPROMPT_* environment variables.

    Values are lowercased for the enum-valued keys; empty strings are kept
    so that ``GITPROMPT_LOG_FILE=`` explicitly disables logging.

    Args:
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        Nested dictionary suitable for ``Settings.from_dict``.
    """
    if environ is None:
        environ = os.environ

    values: dict[str, dict[str, object]] = {}
    for suffix, (section, key) in _ENV_KEYS.items():
        raw = environ.get(f"{ENV_PREFIX}{suffix}")
        if raw is None:
            continue
        value = raw.strip() if key == "file" else raw.strip().lower()
        values.setdefault(section, {})[key] = value
    return dict(values)


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Load settings from the environment.

    Args:
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        Validated Settings.

    Raises:
        ConfigLoadError: If any environment value is invalid.
    """
    try:
        return Settings.from_dict(read_env_values(environ))
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(part) for part in first["loc"])
        variable = next(
            (
                f"{ENV_PREFIX}{suffix}"
                for suffix, path in _ENV_KEYS.items()
                if ".".join(path) == loc
            ),
            None,
        )
        msg = f"Invalid value for {variable or loc}: {first['msg']}"
        raise ConfigLoadError(msg, variable=variable) from e


def safe_load_settings(
    environ: Mapping[str, str] | None = None,
) -> tuple[Settings, str | None]:
    """Load settings, falling back to defaults on error.

    A warning is printed to stderr when the environment holds invalid
    values. Stdout is left untouched.

    Args:
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        Tuple of (Settings, error_message). On success, error_message is None.
    """
    try:
        return load_settings(environ), None
    except ConfigLoadError as e:
        error_msg = str(e)
        print(f"Warning: Failed to load settings: {error_msg}", file=sys.stderr)  # noqa: T201
        return Settings(), error_msg

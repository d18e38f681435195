"""The gitprompt command-line interface."""

from ._app import app, create_app, create_cli_logger, main, run
from ._shared import ExitCode, exit_with_error, get_error_console

__all__ = [
    "ExitCode",
    "app",
    "create_app",
    "create_cli_logger",
    "exit_with_error",
    "get_error_console",
    "main",
    "run",
]

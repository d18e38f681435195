"""The command-line interface for gitprompt."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from cyclopts import App
from rich.console import Console

from gitprompt import __version__
from gitprompt.config import Settings, safe_load_settings
from gitprompt.exceptions import FatalRepositoryError
from gitprompt.repository import GitRepository
from gitprompt.status import collect_report, render_report
from gitprompt.utils import create_logger, create_null_logger

from ._shared import exit_with_error

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

_HELP = (
    "Print a color-coded git status line for the repository containing "
    "the current directory. Prints nothing outside a repository."
)


def create_cli_logger(
    settings: Settings, error_console: Console | None = None
) -> FilteringBoundLogger:
    """Create the CLI logger from settings.

    Args:
        settings: Loaded settings.
        error_console: Console used to warn when the log file is unusable.

    Returns:
        A file logger, or a null logger when no log file is configured or
        the file cannot be opened.
    """
    if not settings.logging.file:
        return create_null_logger()
    try:
        logger = create_logger(
            settings.logging.file,
            level=settings.logging.level.value,
            log_format=settings.logging.format.value,  # type: ignore[arg-type]
        )
    except OSError as e:
        if error_console is not None:
            error_console.print(f"Warning: cannot open log file: {e}", markup=False)
        return create_null_logger()
    return logger.bind(command="gitprompt")


def run(
    cwd: Path | None = None,
    *,
    error_console: Console | None = None,
) -> None:
    """Print the status line for the repository containing ``cwd``.

    Args:
        cwd: Directory to start discovery from. Defaults to the current
            directory.
        error_console: Console for fatal diagnostics.

    Raises:
        SystemExit: With ExitCode.FATAL on a hard repository failure.
    """
    if cwd is None:
        cwd = Path.cwd()

    settings, _ = safe_load_settings()
    logger = create_cli_logger(settings, error_console)

    repo = GitRepository.discover(cwd)
    if repo is None:
        logger.debug("No repository found", cwd=str(cwd))
        return

    with repo:
        logger.debug("Discovered repository", root=str(repo.root))
        try:
            report = collect_report(repo, logger=logger)
        except FatalRepositoryError as e:
            logger.exception("Status collection failed", error=str(e))
            exit_with_error(str(e), console=error_console)

    logger.info(
        "Rendered status line",
        label=report.label,
        ahead=report.divergence.ahead,
        behind=report.divergence.behind,
        staged=report.counts.staged,
        changed=report.counts.changed,
        conflicts=report.counts.conflicts,
        untracked=report.counts.untracked,
    )
    print(render_report(report))  # noqa: T201


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Build the cyclopts application.

    Args:
        console: Console for cyclopts help and version output.
        error_console: Console for errors and fatal diagnostics.
        exit_on_error: Whether cyclopts exits on argument errors.

    Returns:
        The configured App.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="gitprompt",
        help=_HELP,
        version=__version__,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.default
    def _default() -> None:  # pyright: ignore[reportUnusedFunction]
        """Print the status line for the current directory."""
        run(error_console=error_console)

    return app


app = create_app()


def main() -> None:
    """Default entrypoint for the `gitprompt` CLI."""
    app()

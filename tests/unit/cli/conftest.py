from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest
from rich.console import Console

from gitprompt.cli import create_app
from gitprompt.repository import FakeRepository, GitRepository

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:  # pyright: ignore[reportUnusedFunction]
    for name in (
        "GITPROMPT_LOG_FILE",
        "GITPROMPT_LOG_LEVEL",
        "GITPROMPT_LOG_FORMAT",
        "GITPROMPT_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def discovered(mocker: MockerFixture) -> Callable[[FakeRepository | None], None]:
    """Return a function making repository discovery yield the given fake."""

    def _set(repo: FakeRepository | None) -> None:
        _ = mocker.patch.object(GitRepository, "discover", return_value=repo)

    return _set


@pytest.fixture
def gitprompt_cli_with_exit_code(console: Console) -> Callable[..., int]:
    """Create CLI app for testing that returns the exit code."""

    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        try:
            app(args)
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run

"""Shared test fixtures for gitprompt tests."""

import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest
from rich.console import Console

from gitprompt.enums import Status
from gitprompt.repository import StatusEntry

requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git executable not available"
)


@dataclass(frozen=True, slots=True)
class GitWorkspace:
    """A real git repository in a temporary directory."""

    root: Path

    def git(self, *args: str, check: bool = True) -> str:
        """Run git in the workspace and return stripped stdout."""
        result = subprocess.run(
            ["git", *args],
            cwd=str(self.root),
            capture_output=True,
            text=True,
            check=check,
        )
        return result.stdout.strip()

    def write(self, relative: str, content: str = "content\n") -> Path:
        """Write a file relative to the workspace root."""
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def commit_file(self, relative: str, content: str, message: str) -> str:
        """Write, stage and commit a file; return the new commit id."""
        self.write(relative, content)
        self.git("add", relative)
        self.git("commit", "-q", "-m", message)
        return self.head_sha()

    def head_sha(self) -> str:
        return self.git("rev-parse", "HEAD")


def init_git_repo(path: Path, *, branch: str = "main") -> GitWorkspace:
    """Initialize a minimal git repository in the given path."""
    path.mkdir(parents=True, exist_ok=True)
    workspace = GitWorkspace(root=path)
    workspace.git("init", "-q", "-b", branch)
    workspace.git("config", "user.email", "test@example.com")
    workspace.git("config", "user.name", "Test User")
    workspace.git("config", "commit.gpgsign", "false")
    return workspace


@pytest.fixture
def isolated_git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep user and system git configuration out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    for name in (
        "GITPROMPT_LOG_FILE",
        "GITPROMPT_LOG_LEVEL",
        "GITPROMPT_LOG_FORMAT",
        "GITPROMPT_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def git_workspace(tmp_path: Path, isolated_git_env: Path) -> GitWorkspace:
    """Create an empty repository on branch ``main`` (no commits)."""
    return init_git_repo(tmp_path / "repo")


@pytest.fixture
def make_git_repo(
    tmp_path: Path, isolated_git_env: Path
) -> Callable[..., GitWorkspace]:
    """Return a factory creating additional repositories under tmp_path."""

    def _make(name: str, *, branch: str = "main") -> GitWorkspace:
        return init_git_repo(tmp_path / name, branch=branch)

    return _make


MakeEntries = Callable[..., list[StatusEntry]]


@pytest.fixture
def make_entries() -> MakeEntries:
    """Return a factory building status entries from flag sets."""

    def _make(*flags: Status) -> list[StatusEntry]:
        return [
            StatusEntry(path=f"file{i}.txt", status=status)
            for i, status in enumerate(flags)
        ]

    return _make


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )

"""Gitignore-style pattern matching using pathspec.

Rules are consulted the way git consults them, highest precedence first:
the ``.gitignore`` files from the path's own directory up to the worktree
root, then ``$GIT_DIR/info/exclude``, then the user's global excludes file.
Within one source the last matching pattern wins, and the first source
with a matching pattern decides.
"""

import os
from pathlib import Path  # noqa: TC003 - Used at runtime in function parameters
from typing import Final, Self

from pathspec import GitIgnoreSpec

GITIGNORE_NAME: Final = ".gitignore"


def load_gitignore_patterns(path: Path) -> list[str]:
    """Load patterns from a gitignore file.

    Reads a gitignore-format file and returns the patterns. Comments (lines
    starting with #) and empty lines are filtered out.

    Args:
        path: Path to the gitignore file.

    Returns:
        List of patterns from the file. Returns empty list if file doesn't exist.
    """
    if not path.is_file():
        return []

    patterns: list[str] = []
    content = path.read_text(encoding="utf-8", errors="replace")

    for line in content.splitlines():
        stripped = line.strip()
        # Skip empty lines and comments
        if not stripped or stripped.startswith("#"):
            continue
        patterns.append(stripped)

    return patterns


def global_excludes_file(configured: str | None = None) -> Path:
    """Return the user's global excludes file.

    Args:
        configured: Value of ``core.excludesFile``, if set.

    Returns:
        The configured path with ``~`` expanded, or git's default of
        ``$XDG_CONFIG_HOME/git/ignore`` (``~/.config/git/ignore``).
    """
    if configured:
        return Path(configured).expanduser()
    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return base / "git" / "ignore"


def _spec_from_file(path: Path) -> GitIgnoreSpec | None:
    patterns = load_gitignore_patterns(path)
    if not patterns:
        return None
    return GitIgnoreSpec.from_lines(patterns)


class IgnoreRules:
    """Ignore decisions for paths relative to a worktree root.

    Per-directory ``.gitignore`` files are loaded on first use and cached.

    Example:
        >>> rules = IgnoreRules.for_repository(root, git_dir)
        >>> rules.is_ignored("build", is_dir=True)
        True
    """

    __slots__: Final = ("_base_specs", "_directory_specs", "_root")

    def __init__(self, root: Path, base_specs: list[GitIgnoreSpec]) -> None:
        """Initialize with a worktree root and repository-wide rules.

        Args:
            root: Worktree root that relative paths are resolved against.
            base_specs: Rules that apply everywhere, highest precedence first.
        """
        self._root = root
        self._base_specs = base_specs
        self._directory_specs: dict[str, GitIgnoreSpec | None] = {}

    @classmethod
    def for_repository(
        cls,
        root: Path,
        git_dir: Path,
        excludes_file: Path | None = None,
    ) -> Self:
        """Build rules for a repository.

        Args:
            root: Worktree root.
            git_dir: Directory holding ``info/exclude`` (the common git dir).
            excludes_file: Global excludes file. Defaults to
                :func:`global_excludes_file`.

        Returns:
            Rules combining every ignore source.
        """
        if excludes_file is None:
            excludes_file = global_excludes_file()
        sources = (git_dir / "info" / "exclude", excludes_file)
        specs = [spec for spec in map(_spec_from_file, sources) if spec is not None]
        return cls(root, specs)

    def _directory_spec(self, rel_dir: str) -> GitIgnoreSpec | None:
        if rel_dir not in self._directory_specs:
            directory = self._root / rel_dir if rel_dir else self._root
            self._directory_specs[rel_dir] = _spec_from_file(directory / GITIGNORE_NAME)
        return self._directory_specs[rel_dir]

    def is_ignored(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Check whether a worktree path is ignored.

        Args:
            rel_path: Slash-separated path relative to the worktree root.
            is_dir: Whether the path names a directory. Directory-only
                patterns such as ``build/`` match only when this is set.

        Returns:
            True if the highest-precedence matching pattern ignores the path.
        """
        candidate = f"{rel_path}/" if is_dir else rel_path
        parts = rel_path.split("/")

        for depth in range(len(parts) - 1, -1, -1):
            base = "/".join(parts[:depth])
            spec = self._directory_spec(base)
            if spec is None:
                continue
            relative = candidate[len(base) + 1 :] if base else candidate
            decision = spec.check_file(relative).include
            if decision is not None:
                return decision

        for spec in self._base_specs:
            decision = spec.check_file(candidate).include
            if decision is not None:
                return decision
        return False

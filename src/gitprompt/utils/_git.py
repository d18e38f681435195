"""Common git utility functions.

This module provides shared helpers used by the repository backends:
repository discovery and reference name handling.
"""

from pathlib import Path
from typing import Final

from git import InvalidGitRepositoryError, NoSuchPathError, Repo

BRANCH_PREFIX: Final = "refs/heads/"


def discover_repo(cwd: Path | str | None = None) -> Repo | None:
    """Discover git repository from the given directory upward.

    Args:
        cwd: Directory to start search from. If None, uses current directory.

    Returns:
        Repo instance if found, None otherwise.
    """
    start = Path.cwd() if cwd is None else Path(cwd)
    try:
        return Repo(str(start), search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        return None


def strip_refs_heads(branch: str | None) -> str | None:
    """Strip refs/heads/ prefix from a branch reference.

    Args:
        branch: Branch reference, possibly with refs/heads/ prefix.

    Returns:
        Branch name without prefix, or None if input is None.
    """
    if branch is None:
        return None
    if branch.startswith(BRANCH_PREFIX):
        return branch[len(BRANCH_PREFIX) :]
    return branch


def get_worktree_dir(repo: Repo) -> Path:
    """Get the worktree directory for a repository.

    Args:
        repo: The repository instance.

    Returns:
        Path to the worktree directory, or the git directory for bare
        repositories.
    """
    if repo.working_tree_dir is not None:
        return Path(repo.working_tree_dir)
    return Path(repo.git_dir)

"""Shared utilities for gitprompt."""

from gitprompt.utils._git import (
    BRANCH_PREFIX,
    discover_repo,
    get_worktree_dir,
    strip_refs_heads,
)
from gitprompt.utils._ignore import (
    IgnoreRules,
    global_excludes_file,
    load_gitignore_patterns,
)
from gitprompt.utils._logging import create_logger, create_null_logger

__all__ = [
    "BRANCH_PREFIX",
    "IgnoreRules",
    "create_logger",
    "create_null_logger",
    "discover_repo",
    "get_worktree_dir",
    "global_excludes_file",
    "load_gitignore_patterns",
    "strip_refs_heads",
]

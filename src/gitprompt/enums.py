"""Enumeration types for gitprompt."""

from enum import IntFlag, StrEnum


class Status(IntFlag):
    """Per-path status flags.

    Bit values follow libgit2's ``git_status_t`` so that flag sets read the
    same way across tools. A single path may carry several flags, for
    example ``INDEX_MODIFIED | WT_MODIFIED``.
    """

    CURRENT = 0
    INDEX_NEW = 1 << 0
    INDEX_MODIFIED = 1 << 1
    INDEX_DELETED = 1 << 2
    INDEX_RENAMED = 1 << 3
    INDEX_TYPECHANGE = 1 << 4
    WT_NEW = 1 << 7
    WT_MODIFIED = 1 << 8
    WT_DELETED = 1 << 9
    WT_TYPECHANGE = 1 << 10
    WT_RENAMED = 1 << 11
    WT_UNREADABLE = 1 << 12
    IGNORED = 1 << 14
    CONFLICTED = 1 << 15


class Bucket(StrEnum):
    """Status count buckets, one per status entry at most."""

    STAGED = "staged"
    CHANGED = "changed"
    CONFLICTS = "conflicts"
    UNTRACKED = "untracked"


class HeadShape(StrEnum):
    """Shapes HEAD can take when labelling the checkout position."""

    BRANCH = "branch"
    MISSING = "missing"
    SYMBOLIC = "symbolic"
    DETACHED = "detached"


class Color(StrEnum):
    """Color slots used by the status line."""

    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    RESET = "reset"

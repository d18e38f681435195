"""Status report models."""

from dataclasses import dataclass
from typing import Self

from gitprompt.enums import Bucket


@dataclass(frozen=True, slots=True)
class Counts:
    """Per-bucket entry counts.

    Every status entry contributes to at most one bucket, so the sum of the
    fields never exceeds the number of entries.

    Attributes:
        staged: Entries with changes recorded in the index.
        changed: Entries with unstaged working-tree changes.
        conflicts: Entries with unresolved merge conflicts.
        untracked: Entries not known to the index.
    """

    staged: int = 0
    changed: int = 0
    conflicts: int = 0
    untracked: int = 0

    def get(self, bucket: Bucket) -> int:
        """Return the count for ``bucket``."""
        return int(getattr(self, bucket.value))

    @property
    def total(self) -> int:
        """Number of entries attributed to any bucket."""
        return self.staged + self.changed + self.conflicts + self.untracked

    @property
    def is_clean(self) -> bool:
        """Whether every bucket is empty."""
        return self.total == 0


@dataclass(frozen=True, slots=True)
class Divergence:
    """Commits ahead of and behind the upstream.

    Attributes:
        ahead: Commits reachable from HEAD but not from the upstream.
        behind: Commits reachable from the upstream but not from HEAD.
    """

    ahead: int = 0
    behind: int = 0

    @classmethod
    def none(cls) -> Self:
        """Divergence used when no upstream comparison is possible."""
        return cls(ahead=0, behind=0)


@dataclass(frozen=True, slots=True)
class StatusReport:
    """Everything the status line shows.

    Attributes:
        label: Branch name or fallback label for the checkout position.
        divergence: Ahead/behind counts relative to the upstream.
        counts: Per-bucket status counts.
    """

    label: str
    divergence: Divergence
    counts: Counts

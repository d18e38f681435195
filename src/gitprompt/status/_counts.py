"""Status entry classification.

Each status entry is attributed to the first bucket whose mask it
intersects, in the order of CLASSIFICATION. An entry that is both staged and
modified in the worktree therefore counts once, as staged.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Final

from gitprompt.enums import Bucket, Status
from gitprompt.status._models import Counts
from gitprompt.utils import create_null_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from structlog.typing import FilteringBoundLogger

    from gitprompt.repository import RepositoryProtocol, StatusEntry

STAGED_MASK: Final = (
    Status.INDEX_NEW
    | Status.INDEX_MODIFIED
    | Status.INDEX_DELETED
    | Status.INDEX_RENAMED
    | Status.INDEX_TYPECHANGE
)
CHANGED_MASK: Final = (
    Status.WT_MODIFIED | Status.WT_DELETED | Status.WT_RENAMED | Status.WT_TYPECHANGE
)
CONFLICTED_MASK: Final = Status.CONFLICTED
UNTRACKED_MASK: Final = Status.WT_NEW

# Priority order: first match wins
CLASSIFICATION: Final[tuple[tuple[Status, Bucket], ...]] = (
    (STAGED_MASK, Bucket.STAGED),
    (CHANGED_MASK, Bucket.CHANGED),
    (CONFLICTED_MASK, Bucket.CONFLICTS),
    (UNTRACKED_MASK, Bucket.UNTRACKED),
)


def classify_status(status: Status) -> Bucket | None:
    """Return the bucket a flag set belongs to.

    Args:
        status: Flags of a single status entry.

    Returns:
        The highest-priority matching bucket, or None when no bucket
        matches (for example ``IGNORED`` or ``CURRENT``).
    """
    for mask, bucket in CLASSIFICATION:
        if status & mask:
            return bucket
    return None


def tally(entries: Iterable[StatusEntry]) -> Counts:
    """Count entries per bucket in a single pass.

    Args:
        entries: Status entries to classify.

    Returns:
        Counts with one increment per classified entry.
    """
    buckets: Counter[Bucket] = Counter()
    for entry in entries:
        bucket = classify_status(entry.status)
        if bucket is not None:
            buckets[bucket] += 1
    return Counts(**{bucket.value: buckets[bucket] for bucket in Bucket})


def count_statuses(
    repo: RepositoryProtocol,
    *,
    logger: FilteringBoundLogger | None = None,
) -> Counts:
    """Classify every status entry of the repository, untracked included.

    Args:
        repo: Repository to query.
        logger: Optional logger for diagnostics.

    Returns:
        Per-bucket counts.

    Raises:
        StatusEnumerationError: If the status cannot be gathered.
    """
    if logger is None:
        logger = create_null_logger()

    entries = repo.statuses(include_untracked=True)
    counts = tally(entries)
    logger.debug(
        "Counted status entries",
        entries=len(entries),
        staged=counts.staged,
        changed=counts.changed,
        conflicts=counts.conflicts,
        untracked=counts.untracked,
    )
    return counts

"""Repository status summarisation.

This package turns repository state into the prompt status line:

- count_statuses: classify status entries into buckets
- ahead_behind: divergence from the upstream branch
- branch_name: label for the checkout position
- format_report: render the colored line
- collect_report: run the three queries together

Example:
    >>> from gitprompt.repository import FakeRepository
    >>> from gitprompt.status import collect_report, render_report
    >>> report = collect_report(FakeRepository.on_branch("main", "a" * 40))
    >>> report.label
    'main'
"""

from gitprompt.status._branch import (
    ABBREV_KEY,
    DEFAULT_ABBREV,
    DETACHED_MARKER,
    FALLBACK_BRANCH,
    MAX_ABBREV,
    MIN_ABBREV,
    branch_name,
    classify_head,
    detached_label,
    read_abbrev,
)
from gitprompt.status._counts import (
    CLASSIFICATION,
    classify_status,
    count_statuses,
    tally,
)
from gitprompt.status._divergence import ahead_behind
from gitprompt.status._format import COUNT_SEGMENTS, ESCAPES, format_report
from gitprompt.status._models import Counts, Divergence, StatusReport
from gitprompt.status._report import collect_report, render_report

__all__ = [
    "ABBREV_KEY",
    "CLASSIFICATION",
    "COUNT_SEGMENTS",
    "DEFAULT_ABBREV",
    "DETACHED_MARKER",
    "ESCAPES",
    "FALLBACK_BRANCH",
    "MAX_ABBREV",
    "MIN_ABBREV",
    "Counts",
    "Divergence",
    "StatusReport",
    "ahead_behind",
    "branch_name",
    "classify_head",
    "classify_status",
    "collect_report",
    "count_statuses",
    "detached_label",
    "format_report",
    "read_abbrev",
    "render_report",
    "tally",
]

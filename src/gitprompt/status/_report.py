"""Report collection.

Runs the three repository queries in sequence and bundles their results.
The queries share nothing but the read-only repository handle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitprompt.status._branch import branch_name
from gitprompt.status._counts import count_statuses
from gitprompt.status._divergence import ahead_behind
from gitprompt.status._format import format_report
from gitprompt.status._models import StatusReport
from gitprompt.utils import create_null_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from gitprompt.repository import RepositoryProtocol


def collect_report(
    repo: RepositoryProtocol,
    *,
    logger: FilteringBoundLogger | None = None,
) -> StatusReport:
    """Query the repository for everything the status line shows.

    Args:
        repo: Repository to query.
        logger: Optional logger for diagnostics.

    Returns:
        The collected report.

    Raises:
        FatalRepositoryError: If any query hits a hard failure.
    """
    if logger is None:
        logger = create_null_logger()

    counts = count_statuses(repo, logger=logger)
    divergence = ahead_behind(repo, logger=logger)
    label = branch_name(repo, logger=logger)
    return StatusReport(label=label, divergence=divergence, counts=counts)


def render_report(report: StatusReport) -> str:
    """Format a collected report as a status line."""
    return format_report(report.label, report.divergence, report.counts)

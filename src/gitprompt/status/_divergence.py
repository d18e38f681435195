"""Ahead/behind resolution against the upstream branch."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitprompt.exceptions import (
    AncestryError,
    InvariantViolationError,
    ReferenceNotFoundError,
)
from gitprompt.status._models import Divergence
from gitprompt.utils import create_null_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from gitprompt.repository import RepositoryProtocol


def ahead_behind(
    repo: RepositoryProtocol,
    *,
    logger: FilteringBoundLogger | None = None,
) -> Divergence:
    """Compute how far HEAD has diverged from its upstream.

    Resolution walks HEAD, its upstream, and the upstream target. A missing
    link anywhere in that chain (no commits yet, detached HEAD, no upstream
    configured, upstream reference gone, graph walk failure) yields
    ``Divergence.none()``.

    Args:
        repo: Repository to query.
        logger: Optional logger for diagnostics.

    Returns:
        The divergence, or ``(0, 0)`` when it cannot be determined.

    Raises:
        InvariantViolationError: If the resolved HEAD carries no commit id.
    """
    if logger is None:
        logger = create_null_logger()

    try:
        head = repo.head()
    except ReferenceNotFoundError as e:
        logger.debug("HEAD unresolved, skipping divergence", error=str(e))
        return Divergence.none()

    if head.target is None:
        msg = "Unable to determine Oid of head."
        raise InvariantViolationError(msg)

    try:
        upstream = repo.upstream(head)
    except ReferenceNotFoundError as e:
        logger.debug("No upstream, skipping divergence", ref=head.name, error=str(e))
        return Divergence.none()

    if upstream.target is None:
        logger.debug("Upstream has no target", upstream=upstream.name)
        return Divergence.none()

    try:
        ahead, behind = repo.graph_ahead_behind(head.target, upstream.target)
    except AncestryError as e:
        logger.warning("Failed to compute ahead/behind", error=str(e))
        return Divergence.none()

    return Divergence(ahead=ahead, behind=behind)

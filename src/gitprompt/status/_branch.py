"""Checkout position labelling.

HEAD is first classified into a HeadShape, then each shape maps to exactly
one label rule:

- ``branch``: the branch short name
- ``missing``: FALLBACK_BRANCH
- ``symbolic``: FALLBACK_BRANCH
- ``detached``: ``":"`` plus the commit id, cut to ``core.abbrev + 1``
  characters

A symbolic HEAD that does not resolve usually means an unborn branch. Its
label is FALLBACK_BRANCH whatever the branch is called, so a fresh
repository on ``main`` still reads ``master``.

Any HEAD that exists but is not a branch opens the configuration before its
shape is acted on, so an unreadable configuration is fatal in both the
symbolic and the detached case.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from gitprompt.enums import HeadShape
from gitprompt.exceptions import (
    ConfigValueError,
    InvariantViolationError,
    ReferenceNotFoundError,
)
from gitprompt.utils import create_null_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from gitprompt.repository import Reference, RepositoryProtocol

FALLBACK_BRANCH: Final = "master"
DEFAULT_ABBREV: Final = 8
MIN_ABBREV: Final = 4
MAX_ABBREV: Final = 40
DETACHED_MARKER: Final = ":"
ABBREV_KEY: Final = "core.abbrev"


def classify_head(repo: RepositoryProtocol) -> tuple[HeadShape, Reference | None]:
    """Determine the shape of HEAD.

    Args:
        repo: Repository to query.

    Returns:
        The shape and the reference it was derived from. The reference is
        the resolved HEAD when resolution succeeds, the raw HEAD otherwise,
        and None for ``HeadShape.MISSING``.
    """
    try:
        head = repo.head()
    except ReferenceNotFoundError:
        try:
            head = repo.find_reference("HEAD")
        except ReferenceNotFoundError:
            return HeadShape.MISSING, None

    if head.is_branch:
        return HeadShape.BRANCH, head
    if head.symbolic_target is not None:
        return HeadShape.SYMBOLIC, head
    return HeadShape.DETACHED, head


def read_abbrev(
    repo: RepositoryProtocol,
    *,
    logger: FilteringBoundLogger | None = None,
) -> int:
    """Read ``core.abbrev``, falling back to DEFAULT_ABBREV.

    Missing and non-integer values (such as ``auto``) fall back, as do
    lengths git itself rejects: below MIN_ABBREV or above MAX_ABBREV.

    Args:
        repo: Repository to query.
        logger: Optional logger for diagnostics.

    Returns:
        The abbreviation length.

    Raises:
        ConfigOpenError: If the configuration cannot be opened at all.
    """
    if logger is None:
        logger = create_null_logger()

    config = repo.config()
    try:
        abbrev = config.get_int(ABBREV_KEY)
    except ConfigValueError as e:
        logger.debug("Using default abbrev", error=str(e), default=DEFAULT_ABBREV)
        return DEFAULT_ABBREV

    if not MIN_ABBREV <= abbrev <= MAX_ABBREV:
        logger.debug(
            "Ignoring out-of-range abbrev", value=abbrev, default=DEFAULT_ABBREV
        )
        return DEFAULT_ABBREV
    return abbrev


def detached_label(commit: str, abbrev: int) -> str:
    """Build the label for a detached HEAD.

    Args:
        commit: Full hex commit id.
        abbrev: Abbreviation length; the label keeps ``abbrev + 1``
            characters including the marker.

    Returns:
        The truncated label, e.g. ``":1a2b3c4d"`` for ``abbrev=8``.
    """
    return f"{DETACHED_MARKER}{commit}"[: abbrev + 1]


def branch_name(
    repo: RepositoryProtocol,
    *,
    logger: FilteringBoundLogger | None = None,
) -> str:
    """Label the current checkout position.

    Args:
        repo: Repository to query.
        logger: Optional logger for diagnostics.

    Returns:
        The branch short name, FALLBACK_BRANCH, or a detached-commit label.

    Raises:
        InvariantViolationError: If a branch has no readable name, or a
            detached HEAD has no commit id.
        ConfigOpenError: If the configuration is needed and cannot be
            opened.
    """
    if logger is None:
        logger = create_null_logger()

    shape, head = classify_head(repo)
    logger.debug("Classified HEAD", shape=shape.value, ref=head.name if head else None)

    if shape is HeadShape.MISSING:
        return FALLBACK_BRANCH

    if head is None:
        msg = f"HEAD reference missing for shape '{shape}'"
        raise InvariantViolationError(msg)

    if shape is HeadShape.BRANCH:
        name = head.shorthand
        if not name:
            msg = "Unable to determine name of branch."
            raise InvariantViolationError(msg)
        return name

    abbrev = read_abbrev(repo, logger=logger)
    if shape is HeadShape.SYMBOLIC:
        return FALLBACK_BRANCH

    if head.target is None:
        msg = "Unable to determine commit of detached HEAD."
        raise InvariantViolationError(msg)
    return detached_label(head.target, abbrev)

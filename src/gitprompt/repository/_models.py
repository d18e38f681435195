"""Repository models.

This module defines the data structures the repository backends hand to the
status queries.
"""

from dataclasses import dataclass

from gitprompt.enums import Status
from gitprompt.utils._git import BRANCH_PREFIX, strip_refs_heads


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """Status of a single path.

    Attributes:
        path: Repository-relative path. Untracked directories keep their
            trailing slash.
        status: All flags that apply to the path.
    """

    path: str
    status: Status


@dataclass(frozen=True, slots=True)
class Reference:
    """A resolved or raw reference.

    A reference is either direct (``target`` set) or symbolic
    (``symbolic_target`` set). References returned by ``head()`` are always
    direct; references returned by ``find_reference()`` may be either.

    Attributes:
        name: Full reference name, such as ``refs/heads/main`` or ``HEAD``.
        target: Hex commit id the reference points at, if direct.
        symbolic_target: Reference name this one points at, if symbolic.
    """

    name: str
    target: str | None = None
    symbolic_target: str | None = None

    @property
    def is_branch(self) -> bool:
        """Whether this reference is a local branch."""
        return self.name.startswith(BRANCH_PREFIX)

    @property
    def shorthand(self) -> str:
        """Reference name without the ``refs/heads/`` prefix."""
        stripped = strip_refs_heads(self.name)
        return self.name if stripped is None else stripped

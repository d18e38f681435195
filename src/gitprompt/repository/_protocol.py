"""Repository protocol for type-safe dependency injection.

This module defines runtime-checkable Protocols for the repository access
the status queries need. The GitPython-backed GitRepository and the
in-memory FakeRepository both satisfy them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from gitprompt.repository._models import Reference, StatusEntry


@runtime_checkable
class RepositoryConfig(Protocol):
    """Read access to repository configuration."""

    def get_int(self, key: str) -> int:
        """Read an integer configuration value.

        Args:
            key: Dotted key such as ``core.abbrev``.

        Returns:
            The integer value.

        Raises:
            ConfigValueError: If the key is missing or not an integer.
        """
        ...


@runtime_checkable
class RepositoryProtocol(Protocol):
    """Protocol for read-only repository queries.

    Example:
        >>> def is_on_branch(repo: RepositoryProtocol) -> bool:
        ...     try:
        ...         return repo.head().is_branch
        ...     except ReferenceNotFoundError:
        ...         return False
    """

    def close(self) -> None:
        """Release resources held by the repository."""
        ...

    def statuses(self, *, include_untracked: bool = True) -> list[StatusEntry]:
        """Enumerate status entries for the working tree and index.

        Args:
            include_untracked: Whether untracked paths are reported.

        Returns:
            One entry per path with at least one status flag.

        Raises:
            StatusEnumerationError: If the status cannot be gathered.
        """
        ...

    def head(self) -> Reference:
        """Resolve HEAD to a direct reference.

        When HEAD points at a branch, the branch reference is returned.
        When HEAD is detached, a reference named ``HEAD`` is returned.

        Returns:
            A direct Reference with ``target`` set.

        Raises:
            ReferenceNotFoundError: If HEAD cannot be resolved to a commit,
                for example in a repository without commits.
        """
        ...

    def find_reference(self, name: str) -> Reference:
        """Look up a reference without following symbolic links.

        Args:
            name: Full reference name, such as ``HEAD``.

        Returns:
            The raw Reference, symbolic or direct.

        Raises:
            ReferenceNotFoundError: If the reference does not exist.
        """
        ...

    def upstream(self, branch: Reference) -> Reference:
        """Resolve the configured upstream of a local branch.

        Args:
            branch: A local branch reference.

        Returns:
            The upstream reference with its target resolved when possible.

        Raises:
            UpstreamNotConfiguredError: If no upstream is configured.
            ReferenceNotFoundError: If ``branch`` is not a branch.
        """
        ...

    def graph_ahead_behind(self, local: str, upstream: str) -> tuple[int, int]:
        """Count commits unique to each side of two commits.

        Args:
            local: Hex id of the local commit.
            upstream: Hex id of the upstream commit.

        Returns:
            ``(ahead, behind)``: commits reachable from ``local`` but not
            ``upstream``, and the reverse.

        Raises:
            AncestryError: If the commit graph cannot be walked.
        """
        ...

    def config(self) -> RepositoryConfig:
        """Open the repository configuration.

        Returns:
            Configuration reader.

        Raises:
            ConfigOpenError: If the configuration cannot be opened.
        """
        ...

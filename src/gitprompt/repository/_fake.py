"""Fake repository for testing.

This module provides a FakeRepository class that implements
RepositoryProtocol for use in tests without requiring an actual Git
repository.
"""

from dataclasses import dataclass, field
from types import TracebackType
from typing import Self

from gitprompt.enums import Status
from gitprompt.exceptions import (
    AncestryError,
    ConfigOpenError,
    ConfigValueError,
    ReferenceNotFoundError,
    StatusEnumerationError,
    UpstreamNotConfiguredError,
)
from gitprompt.repository._models import Reference, StatusEntry


@dataclass(slots=True)
class FakeConfig:
    """In-memory configuration keyed by dotted name."""

    values: dict[str, object] = field(default_factory=dict)

    def get_int(self, key: str) -> int:
        if key not in self.values:
            msg = f"Config value '{key}' was not found"
            raise ConfigValueError(msg, key=key)
        value = self.values[key]
        if isinstance(value, bool) or not isinstance(value, int):
            msg = f"Config value '{key}' is not an integer: {value!r}"
            raise ConfigValueError(msg, key=key)
        return value


@dataclass(slots=True)
class FakeRepository:
    """Fake Git repository for testing.

    The fake is described by plain data:

    - ``entries`` is returned verbatim from ``statuses()``
    - ``refs`` maps reference names to raw References; ``HEAD`` is followed
      through symbolic targets by ``head()``
    - ``upstreams`` maps branch names to upstream reference names
    - ``graph`` maps ``(local, upstream)`` commit pairs to ``(ahead, behind)``
    - ``config_values`` backs ``config().get_int()``

    Failure switches (``fail_status``, ``fail_config``) make the fake raise
    the fatal errors a corrupt repository would.

    Example:
        >>> repo = FakeRepository.on_branch("main", "a" * 40)
        >>> repo.head().shorthand
        'main'
    """

    entries: list[StatusEntry] = field(default_factory=list)
    refs: dict[str, Reference] = field(default_factory=dict)
    upstreams: dict[str, str] = field(default_factory=dict)
    graph: dict[tuple[str, str], tuple[int, int]] = field(default_factory=dict)
    config_values: dict[str, object] = field(default_factory=dict)
    fail_status: bool = False
    fail_config: bool = False
    closed: bool = False

    # =========================================================================
    # Builders
    # =========================================================================

    @classmethod
    def on_branch(cls, name: str, target: str) -> Self:
        """Create a fake with HEAD on a branch pointing at ``target``."""
        branch_ref = f"refs/heads/{name}"
        return cls(
            refs={
                "HEAD": Reference(name="HEAD", symbolic_target=branch_ref),
                branch_ref: Reference(name=branch_ref, target=target),
            }
        )

    @classmethod
    def unborn(cls, name: str = "master") -> Self:
        """Create a fake whose HEAD points at a branch with no commits."""
        return cls(
            refs={"HEAD": Reference(name="HEAD", symbolic_target=f"refs/heads/{name}")}
        )

    @classmethod
    def detached(cls, target: str) -> Self:
        """Create a fake with HEAD detached at ``target``."""
        return cls(refs={"HEAD": Reference(name="HEAD", target=target)})

    def set_upstream(
        self, branch: str, upstream_ref: str, target: str | None = None
    ) -> None:
        """Configure ``branch`` to track ``upstream_ref``.

        Args:
            branch: Local branch short name.
            upstream_ref: Full name of the upstream reference.
            target: Commit the upstream points at. When None, the upstream
                reference is configured but does not exist.
        """
        self.upstreams[branch] = upstream_ref
        if target is not None:
            self.refs[upstream_ref] = Reference(name=upstream_ref, target=target)

    # =========================================================================
    # Context Manager Protocol
    # =========================================================================

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # =========================================================================
    # RepositoryProtocol Methods
    # =========================================================================

    def close(self) -> None:
        self.closed = True

    def statuses(self, *, include_untracked: bool = True) -> list[StatusEntry]:
        if self.fail_status:
            msg = "Unable to gather status information."
            raise StatusEnumerationError(msg)
        if include_untracked:
            return list(self.entries)
        return [e for e in self.entries if e.status != Status.WT_NEW]

    def find_reference(self, name: str) -> Reference:
        try:
            return self.refs[name]
        except KeyError:
            msg = f"Reference '{name}' not found"
            raise ReferenceNotFoundError(msg, name=name) from None

    def head(self) -> Reference:
        ref = self.find_reference("HEAD")
        seen = {ref.name}
        while ref.symbolic_target is not None:
            try:
                ref = self.find_reference(ref.symbolic_target)
            except ReferenceNotFoundError as e:
                msg = f"Reference 'HEAD' cannot be resolved: {e}"
                raise ReferenceNotFoundError(msg, name="HEAD") from e
            if ref.name in seen:
                msg = f"Symbolic reference loop at '{ref.name}'"
                raise ReferenceNotFoundError(msg, name="HEAD")
            seen.add(ref.name)
        if ref.target is None:
            msg = "Reference 'HEAD' does not point at a commit"
            raise ReferenceNotFoundError(msg, name="HEAD")
        return ref

    def upstream(self, branch: Reference) -> Reference:
        if not branch.is_branch:
            msg = f"Reference '{branch.name}' is not a local branch"
            raise ReferenceNotFoundError(msg, name=branch.name)
        upstream_name = self.upstreams.get(branch.shorthand)
        if upstream_name is None:
            msg = f"Branch '{branch.shorthand}' has no upstream configured"
            raise UpstreamNotConfiguredError(msg, name=branch.name)
        return self.refs.get(upstream_name, Reference(name=upstream_name))

    def graph_ahead_behind(self, local: str, upstream: str) -> tuple[int, int]:
        if local == upstream:
            return (0, 0)
        try:
            return self.graph[(local, upstream)]
        except KeyError:
            msg = f"Unable to walk commit graph between {local} and {upstream}"
            raise AncestryError(msg) from None

    def config(self) -> FakeConfig:
        if self.fail_config:
            msg = "Unable to open config for this repository."
            raise ConfigOpenError(msg)
        return FakeConfig(values=self.config_values)

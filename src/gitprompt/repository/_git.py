"""GitPython-backed repository.

This module implements RepositoryProtocol on top of GitPython's pure-Python
layers: references and configuration are read by GitPython, objects by
gitdb, and the index with GitPython's index reader. No query runs the git
executable, so repository settings that git itself rejects (an invalid
``core.abbrev``, say) cannot abort status collection. Every query is
read-only; the index is never refreshed on disk.
"""

# ruff: noqa: TC003  # Path needed at runtime for property annotations
import configparser
from collections.abc import Iterable
from pathlib import Path
from types import TracebackType
from typing import Final, Self

from git import Repo, SymbolicReference
from git.config import GitConfigParser

from gitprompt.exceptions import (
    AncestryError,
    ConfigOpenError,
    ConfigValueError,
    ObjectReadError,
    ReferenceNotFoundError,
    StatusEnumerationError,
    UpstreamNotConfiguredError,
)
from gitprompt.repository._graph import count_ahead_behind
from gitprompt.repository._models import Reference, StatusEntry
from gitprompt.repository._objects import ObjectStore
from gitprompt.repository._worktree import HeadTree, collect_statuses, read_index
from gitprompt.utils._git import discover_repo, get_worktree_dir
from gitprompt.utils._ignore import IgnoreRules, global_excludes_file

_MISSING: Final = (configparser.NoSectionError, configparser.NoOptionError, KeyError)


def map_fetch_refspec(ref: str, refspecs: Iterable[str]) -> str | None:
    """Map a remote ref to its remote-tracking ref.

    Args:
        ref: Full ref name on the remote, such as ``refs/heads/main``.
        refspecs: The remote's ``fetch`` refspecs, in configuration order.

    Returns:
        The local ref the first matching refspec maps ``ref`` to, or None
        if no refspec matches.

    Example:
        >>> specs = ["+refs/heads/*:refs/remotes/origin/*"]
        >>> map_fetch_refspec("refs/heads/main", specs)
        'refs/remotes/origin/main'
    """
    for refspec in refspecs:
        if refspec.startswith("^"):
            # Negative refspecs only exclude
            continue
        source, colon, destination = refspec.removeprefix("+").partition(":")
        if not colon or not destination:
            continue
        if "*" not in source:
            if source == ref:
                return destination
            continue
        prefix, _, suffix = source.partition("*")
        if (
            ref.startswith(prefix)
            and ref.endswith(suffix)
            and len(ref) >= len(prefix) + len(suffix)
        ):
            matched = ref[len(prefix) : len(ref) - len(suffix)]
            return destination.replace("*", matched, 1)
    return None


def _split_key(key: str) -> tuple[str, str]:
    """Split a dotted git config key into (section, option).

    ``core.abbrev`` becomes ``("core", "abbrev")`` and
    ``branch.main.remote`` becomes ``('branch "main"', "remote")``.
    """
    section, _, option = key.rpartition(".")
    if not section or not option:
        msg = f"Invalid config key: {key!r}"
        raise ConfigValueError(msg, key=key)
    name, dot, subsection = section.partition(".")
    if dot:
        section = f'{name} "{subsection}"'
    return section, option


class GitConfig:
    """Read access to a repository's merged git configuration."""

    __slots__: Final = ("_reader",)

    def __init__(self, reader: GitConfigParser) -> None:
        self._reader = reader

    def _locate(self, key: str) -> tuple[str, str]:
        section, option = _split_key(key)
        try:
            written = self._reader.options(section)
        except configparser.NoSectionError:
            return section, option
        # Option names are case-insensitive; match the spelling on disk
        for name in written:
            if name.lower() == option.lower():
                return section, name
        return section, option

    def _value(self, key: str) -> object:
        section, option = self._locate(key)
        try:
            return self._reader.get_value(section, option)
        except _MISSING as e:
            msg = f"Config value '{key}' was not found"
            raise ConfigValueError(msg, key=key) from e

    def get_int(self, key: str) -> int:
        """Read an integer configuration value.

        Args:
            key: Dotted key such as ``core.abbrev``.

        Returns:
            The integer value.

        Raises:
            ConfigValueError: If the key is missing or not an integer.
        """
        value = self._value(key)
        if isinstance(value, bool) or not isinstance(value, int):
            msg = f"Config value '{key}' is not an integer: {value!r}"
            raise ConfigValueError(msg, key=key)
        return value

    def get_str(self, key: str) -> str:
        """Read a configuration value as written, without type conversion.

        Raises:
            ConfigValueError: If the key is missing.
        """
        section, option = self._locate(key)
        try:
            value: str = self._reader.get(section, option)
        except _MISSING as e:
            msg = f"Config value '{key}' was not found"
            raise ConfigValueError(msg, key=key) from e
        return value

    def get_all(self, key: str) -> list[str]:
        """Read every value of a multi-valued key, in configuration order.

        Returns an empty list when the key is missing.
        """
        section, option = self._locate(key)
        try:
            values = self._reader.get_values(section, option)
        except _MISSING:
            return []
        return [str(value) for value in values]

    def get_bool(self, key: str, *, default: bool) -> bool:
        """Read a boolean value, falling back to ``default``.

        Values that are missing or not booleans give ``default``. A key
        written without a value counts as true, as in git.
        """
        try:
            value = self._value(key)
        except ConfigValueError:
            return default
        if value == "":
            return True
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return value != 0
        return default


class GitRepository:
    """Read-only repository queries backed by GitPython.

    Implements the context manager protocol; the underlying Repo is closed
    on exit.

    Example:
        >>> repo = GitRepository.discover()
        >>> if repo is not None:
        ...     with repo:
        ...         entries = repo.statuses()
    """

    __slots__: Final = ("_objects", "_repo")

    def __init__(self, repo: Repo) -> None:
        self._repo = repo
        self._objects = ObjectStore(Path(repo.common_dir) / "objects")

    @classmethod
    def discover(cls, cwd: Path | str | None = None) -> Self | None:
        """Discover the repository containing ``cwd``.

        Args:
            cwd: Directory to start from. Defaults to the current directory.

        Returns:
            A GitRepository, or None if no repository exists at or above
            ``cwd``.
        """
        repo = discover_repo(cwd)
        if repo is None:
            return None
        return cls(repo)

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

    def close(self) -> None:
        """Close the underlying GitPython Repo."""
        self._repo.close()

    @property
    def root(self) -> Path:
        """Worktree directory of the repository."""
        return get_worktree_dir(self._repo)

    # =========================================================================
    # Status
    # =========================================================================

    def _head_tree(self) -> HeadTree:
        try:
            head = self.head()
        except ReferenceNotFoundError:
            # Unborn branch: everything in the index is new
            return {}
        if head.target is None:
            return {}
        commit = self._objects.commit(head.target)
        return self._objects.tree_entries(commit.tree)

    def _ignore_rules(self, config: GitConfig) -> IgnoreRules:
        try:
            configured: str | None = config.get_str("core.excludesFile")
        except ConfigValueError:
            configured = None
        return IgnoreRules.for_repository(
            self.root,
            Path(self._repo.common_dir),
            global_excludes_file(configured),
        )

    def statuses(self, *, include_untracked: bool = True) -> list[StatusEntry]:
        config = self.config()
        rules = self._ignore_rules(config) if include_untracked else None
        index = read_index(Path(self._repo.git_dir) / "index")
        try:
            head_tree = self._head_tree()
        except ObjectReadError as e:
            msg = "Unable to gather status information."
            raise StatusEnumerationError(msg) from e
        return collect_statuses(
            self.root,
            head_tree,
            index,
            rules=rules,
            filemode=config.get_bool("core.fileMode", default=True),
        )

    # =========================================================================
    # References
    # =========================================================================

    def _dereference(self, name: str) -> str:
        try:
            return SymbolicReference.dereference_recursive(self._repo, name)
        except (ValueError, TypeError) as e:
            msg = f"Reference '{name}' cannot be resolved"
            raise ReferenceNotFoundError(msg, name=name) from e

    def head(self) -> Reference:
        head = self._repo.head
        try:
            name = "HEAD" if head.is_detached else head.reference.path
        except (ValueError, TypeError) as e:
            msg = "Reference 'HEAD' cannot be resolved"
            raise ReferenceNotFoundError(msg, name="HEAD") from e
        return Reference(name=name, target=self._dereference(name))

    def find_reference(self, name: str) -> Reference:
        ref = SymbolicReference(self._repo, name)
        try:
            if ref.is_detached:
                return Reference(name=name, target=self._dereference(name))
            return Reference(name=name, symbolic_target=ref.reference.path)
        except (ValueError, TypeError) as e:
            msg = f"Reference '{name}' not found"
            raise ReferenceNotFoundError(msg, name=name) from e

    def upstream(self, branch: Reference) -> Reference:
        if not branch.is_branch:
            msg = f"Reference '{branch.name}' is not a local branch"
            raise ReferenceNotFoundError(msg, name=branch.name)

        short = branch.shorthand
        try:
            config = self.config()
            remote = config.get_str(f"branch.{short}.remote")
            merge = config.get_str(f"branch.{short}.merge")
        except (ConfigOpenError, ConfigValueError) as e:
            msg = f"Branch '{short}' has no usable upstream"
            raise UpstreamNotConfiguredError(msg, name=branch.name) from e

        if remote == ".":
            # Tracking another local branch
            name: str | None = merge
        else:
            name = map_fetch_refspec(merge, config.get_all(f"remote.{remote}.fetch"))
        if name is None:
            msg = f"Branch '{short}' has no usable upstream"
            raise UpstreamNotConfiguredError(msg, name=branch.name)

        try:
            target: str | None = self._dereference(name)
        except ReferenceNotFoundError:
            target = None
        return Reference(name=name, target=target)

    def graph_ahead_behind(self, local: str, upstream: str) -> tuple[int, int]:
        try:
            return count_ahead_behind(local, upstream, self._objects.commit)
        except ObjectReadError as e:
            msg = f"Unable to walk commit graph between {local} and {upstream}"
            raise AncestryError(msg) from e

    # =========================================================================
    # Configuration
    # =========================================================================

    def config(self) -> GitConfig:
        try:
            reader = self._repo.config_reader()
            reader.read()  # pyright: ignore[reportUnusedCallResult]
        except (OSError, configparser.Error) as e:
            msg = "Unable to open config for this repository."
            raise ConfigOpenError(msg) from e
        return GitConfig(reader)

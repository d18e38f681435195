"""Working tree status without the git executable.

Status is the union of two comparisons, as in ``git status``:

- the HEAD tree against the index gives the ``INDEX_*`` flags
- the index against the working tree gives the ``WT_*`` flags

Paths with unmerged index stages are reported as ``CONFLICTED`` only.
Untracked directories are reported once, with a trailing slash, and only
when they hold at least one file that is not ignored. Renames are not
detected.
"""

import os
import stat
import struct
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from git.index.fun import read_cache
from git.index.typ import IndexEntry

from gitprompt.enums import Status
from gitprompt.exceptions import StatusEnumerationError
from gitprompt.repository._models import StatusEntry
from gitprompt.repository._objects import blob_sha
from gitprompt.utils._ignore import IgnoreRules

GITLINK_MODE: Final = 0o160000
SYMLINK_MODE: Final = 0o120000
EXECUTABLE_BIT: Final = 0o100
DOT_GIT: Final = ".git"

# Path to (mode, binary id); the mode's file-type bits give the object kind
HeadTree = Mapping[str, tuple[int, bytes]]


@dataclass(frozen=True, slots=True)
class IndexSnapshot:
    """Entries of the index file as last written.

    Attributes:
        entries: Entries keyed by ``(path, stage)``.
        mtime: Modification time of the index file, or None when there is
            no index yet. Entries changed in the same second are hashed
            rather than trusted.
    """

    entries: Mapping[tuple[str, int], IndexEntry]
    mtime: float | None = None

    def stage_zero(self) -> dict[str, IndexEntry]:
        return {
            path: entry for (path, stage), entry in self.entries.items() if stage == 0
        }

    def conflicted(self) -> set[str]:
        return {path for path, stage in self.entries if stage > 0}


def read_index(index_path: Path) -> IndexSnapshot:
    """Read an index file without refreshing it.

    Args:
        index_path: Path to the index file.

    Returns:
        The parsed entries; empty when the file does not exist.

    Raises:
        StatusEnumerationError: If the file is unreadable, truncated, or of
            an unsupported version.
    """
    try:
        with index_path.open("rb") as stream:
            _, entries, _, _ = read_cache(stream)
        mtime = index_path.stat().st_mtime
    except FileNotFoundError:
        return IndexSnapshot(entries={})
    except (OSError, ValueError, AssertionError, struct.error) as e:
        msg = "Unable to gather status information."
        raise StatusEnumerationError(msg) from e
    by_path = {(str(path), stage): entry for (path, stage), entry in entries.items()}
    return IndexSnapshot(entries=by_path, mtime=mtime)


def _kind(mode: int) -> int:
    return stat.S_IFMT(mode)


def index_changes(head_tree: HeadTree, index: IndexSnapshot) -> dict[str, Status]:
    """Compare the HEAD tree with stage 0 of the index.

    Args:
        head_tree: Flattened HEAD tree; empty on an unborn branch.
        index: The index snapshot.

    Returns:
        ``INDEX_*`` flags for every path that differs, plus ``CONFLICTED``
        for every path with unmerged stages.
    """
    staged = index.stage_zero()
    conflicted = index.conflicted()
    changes: dict[str, Status] = dict.fromkeys(conflicted, Status.CONFLICTED)

    for path in head_tree.keys() | staged.keys():
        if path in conflicted:
            continue
        entry = staged.get(path)
        if entry is not None and entry.intent_to_add:
            continue
        if path not in head_tree:
            changes[path] = Status.INDEX_NEW
        elif entry is None:
            changes[path] = Status.INDEX_DELETED
        else:
            mode, sha = head_tree[path]
            if _kind(mode) != _kind(entry.mode):
                changes[path] = Status.INDEX_TYPECHANGE
            elif sha != entry.binsha or mode != entry.mode:
                changes[path] = Status.INDEX_MODIFIED
    return changes


def _mtime_matches(
    entry: IndexEntry, st: os.stat_result, index_mtime: float | None
) -> bool:
    seconds, nanoseconds = divmod(st.st_mtime_ns, 1_000_000_000)
    if entry.mtime != (seconds & 0xFFFFFFFF, nanoseconds):
        return False
    # Racily clean: written in the same second as the index itself
    return index_mtime is not None and st.st_mtime < index_mtime


def worktree_status(
    root: Path,
    entry: IndexEntry,
    *,
    index_mtime: float | None = None,
    filemode: bool = True,
) -> Status:
    """Compare one stage-0 index entry with the file on disk.

    Args:
        root: Worktree root.
        entry: The index entry.
        index_mtime: Modification time of the index file.
        filemode: Whether executable-bit changes count (``core.fileMode``).

    Returns:
        A single ``WT_*`` flag, or ``Status.CURRENT`` when unchanged.
    """
    if entry.mode == GITLINK_MODE or entry.skip_worktree:
        return Status.CURRENT

    path = root / entry.path
    try:
        st = path.lstat()
    except (FileNotFoundError, NotADirectoryError):
        return Status.WT_DELETED
    if stat.S_ISDIR(st.st_mode):
        return Status.WT_DELETED
    if entry.intent_to_add:
        return Status.WT_NEW

    is_link = stat.S_ISLNK(st.st_mode)
    if is_link != (_kind(entry.mode) == SYMLINK_MODE):
        return Status.WT_TYPECHANGE
    executable = bool(st.st_mode & EXECUTABLE_BIT)
    if not is_link and filemode and executable != bool(entry.mode & EXECUTABLE_BIT):
        return Status.WT_MODIFIED
    if entry.size != st.st_size & 0xFFFFFFFF:
        return Status.WT_MODIFIED
    if _mtime_matches(entry, st, index_mtime):
        return Status.CURRENT

    data = os.readlink(os.fsencode(path)) if is_link else path.read_bytes()
    return Status.CURRENT if blob_sha(data) == entry.binsha else Status.WT_MODIFIED


class _UntrackedWalker:
    """Finds untracked paths the way ``--untracked-files=normal`` does."""

    __slots__: Final = ("_root", "_rules", "_tracked", "_tracked_dirs")

    def __init__(self, root: Path, tracked: set[str], rules: IgnoreRules) -> None:
        self._root = root
        self._rules = rules
        self._tracked = tracked
        self._tracked_dirs = {path.rsplit("/", 1)[0] for path in tracked if "/" in path}
        # Every ancestor of a tracked path is a tracked directory
        for directory in list(self._tracked_dirs):
            while "/" in directory:
                directory = directory.rsplit("/", 1)[0]
                self._tracked_dirs.add(directory)

    def _scan(self, rel_dir: str) -> list[os.DirEntry[str]]:
        with os.scandir(self._root / rel_dir if rel_dir else self._root) as entries:
            kept = [entry for entry in entries if entry.name != DOT_GIT]
        return sorted(kept, key=lambda entry: entry.name)

    def walk(self, rel_dir: str = "", *, ignored: bool = False) -> list[str]:
        found: list[str] = []
        for entry in self._scan(rel_dir):
            rel = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
            if rel in self._tracked:
                continue
            if entry.is_dir(follow_symlinks=False):
                dir_ignored = ignored or self._rules.is_ignored(rel, is_dir=True)
                if rel in self._tracked_dirs:
                    found.extend(self.walk(rel, ignored=dir_ignored))
                elif not dir_ignored and self._holds_untracked(rel):
                    found.append(f"{rel}/")
            elif not ignored and not self._rules.is_ignored(rel):
                found.append(rel)
        return found

    def _holds_untracked(self, rel_dir: str) -> bool:
        if (self._root / rel_dir / DOT_GIT).exists():
            # A nested repository counts as untracked content
            return True
        for entry in self._scan(rel_dir):
            rel = f"{rel_dir}/{entry.name}"
            if entry.is_dir(follow_symlinks=False):
                ignored = self._rules.is_ignored(rel, is_dir=True)
                if not ignored and self._holds_untracked(rel):
                    return True
            elif not self._rules.is_ignored(rel):
                return True
        return False


def collect_statuses(
    root: Path,
    head_tree: HeadTree,
    index: IndexSnapshot,
    *,
    rules: IgnoreRules | None = None,
    filemode: bool = True,
) -> list[StatusEntry]:
    """Compute the status of every changed path in a worktree.

    Args:
        root: Worktree root.
        head_tree: Flattened HEAD tree; empty on an unborn branch.
        index: The index snapshot.
        rules: Ignore rules. Untracked files are skipped when None.
        filemode: Whether executable-bit changes count.

    Returns:
        One entry per path with non-empty flags, sorted by path.

    Raises:
        StatusEnumerationError: If the worktree cannot be read.
    """
    changes = index_changes(head_tree, index)
    try:
        for path, entry in index.stage_zero().items():
            flag = worktree_status(
                root, entry, index_mtime=index.mtime, filemode=filemode
            )
            if flag:
                changes[path] = changes.get(path, Status.CURRENT) | flag

        if rules is not None:
            tracked = {path for path, _ in index.entries}
            for path in _UntrackedWalker(root, tracked, rules).walk():
                changes[path] = Status.WT_NEW
    except OSError as e:
        msg = "Unable to gather status information."
        raise StatusEnumerationError(msg) from e

    return [
        StatusEntry(path=path, status=status)
        for path, status in sorted(changes.items())
        if status
    ]

"""Tests for index and working tree comparison."""

from __future__ import annotations

import os
from struct import pack
from typing import TYPE_CHECKING

import pytest
from git.index.typ import (
    CE_EXT_INTENT_TO_ADD,
    CE_EXT_SKIP_WORKTREE,
    CE_EXTENDED,
    IndexEntry,
)

from gitprompt.enums import Status
from gitprompt.exceptions import StatusEnumerationError
from gitprompt.repository import StatusEntry
from gitprompt.repository._objects import blob_sha
from gitprompt.repository._worktree import (
    GITLINK_MODE,
    SYMLINK_MODE,
    IndexSnapshot,
    collect_statuses,
    index_changes,
    read_index,
    worktree_status,
)
from gitprompt.utils._ignore import IgnoreRules

if TYPE_CHECKING:
    from pathlib import Path

FILE_MODE = 0o100644
EXEC_MODE = 0o100755


def index_entry(
    path: str,
    data: bytes = b"content\n",
    *,
    mode: int = FILE_MODE,
    stage: int = 0,
    stat_of: Path | None = None,
    extended_flags: int = 0,
) -> IndexEntry:
    """Build an index entry, copying size and mtime from ``stat_of``."""
    seconds, nanoseconds = 0, 0
    size = len(data)
    if stat_of is not None:
        st = stat_of.lstat()
        seconds, nanoseconds = divmod(st.st_mtime_ns, 1_000_000_000)
        size = st.st_size
    flags = stage << 12 | (CE_EXTENDED if extended_flags else 0)
    return IndexEntry(
        (
            mode,
            blob_sha(data),
            flags,
            path,
            pack(">LL", 0, 0),
            pack(">LL", seconds, nanoseconds),
            0,
            0,
            0,
            0,
            size,
            extended_flags,
        )
    )


def snapshot(*entries: IndexEntry, mtime: float | None = None) -> IndexSnapshot:
    return IndexSnapshot(
        entries={(entry.path, entry.stage): entry for entry in entries}, mtime=mtime
    )


def tree_of(*entries: IndexEntry) -> dict[str, tuple[int, bytes]]:
    return {entry.path: (entry.mode, entry.binsha) for entry in entries}


def later_than(path: Path) -> float:
    return path.lstat().st_mtime + 10


class TestIndexChanges:
    def test_unchanged(self) -> None:
        entry = index_entry("a.txt")

        assert index_changes(tree_of(entry), snapshot(entry)) == {}

    def test_new_modified_deleted(self) -> None:
        head = tree_of(index_entry("kept.txt"), index_entry("gone.txt"))
        index = snapshot(
            index_entry("kept.txt", b"changed\n"), index_entry("added.txt")
        )

        assert index_changes(head, index) == {
            "kept.txt": Status.INDEX_MODIFIED,
            "gone.txt": Status.INDEX_DELETED,
            "added.txt": Status.INDEX_NEW,
        }

    def test_mode_change_is_modification(self) -> None:
        head = tree_of(index_entry("run.sh"))
        index = snapshot(index_entry("run.sh", mode=EXEC_MODE))

        assert index_changes(head, index) == {"run.sh": Status.INDEX_MODIFIED}

    def test_symlink_replacing_file_is_typechange(self) -> None:
        head = tree_of(index_entry("link"))
        index = snapshot(index_entry("link", b"target", mode=SYMLINK_MODE))

        assert index_changes(head, index) == {"link": Status.INDEX_TYPECHANGE}

    def test_unmerged_path_is_conflicted_only(self) -> None:
        head = tree_of(index_entry("both.txt"))
        index = snapshot(
            index_entry("both.txt", b"base\n", stage=1),
            index_entry("both.txt", b"ours\n", stage=2),
            index_entry("both.txt", b"theirs\n", stage=3),
        )

        assert index_changes(head, index) == {"both.txt": Status.CONFLICTED}

    def test_unborn_branch_stages_everything(self) -> None:
        index = snapshot(index_entry("a.txt"), index_entry("b/c.txt"))

        assert index_changes({}, index) == {
            "a.txt": Status.INDEX_NEW,
            "b/c.txt": Status.INDEX_NEW,
        }

    def test_intent_to_add_is_not_staged(self) -> None:
        entry = index_entry("later.txt", b"", extended_flags=CE_EXT_INTENT_TO_ADD)

        assert index_changes({}, snapshot(entry)) == {}


class TestWorktreeStatus:
    def test_clean_by_stat(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        _ = path.write_bytes(b"content\n")
        entry = index_entry("a.txt", stat_of=path)

        status = worktree_status(tmp_path, entry, index_mtime=later_than(path))

        assert status == Status.CURRENT

    def test_stat_match_skips_content_check(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        _ = path.write_bytes(b"content\n")
        entry = index_entry("a.txt", b"CONTENT\n", stat_of=path)

        status = worktree_status(tmp_path, entry, index_mtime=later_than(path))

        assert status == Status.CURRENT

    def test_racily_clean_entry_is_hashed(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        _ = path.write_bytes(b"content\n")
        entry = index_entry("a.txt", b"CONTENT\n", stat_of=path)

        status = worktree_status(tmp_path, entry, index_mtime=path.stat().st_mtime)

        assert status == Status.WT_MODIFIED

    def test_touched_but_identical(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        _ = path.write_bytes(b"content\n")

        assert worktree_status(tmp_path, index_entry("a.txt")) == Status.CURRENT

    def test_same_size_different_content(self, tmp_path: Path) -> None:
        _ = (tmp_path / "a.txt").write_bytes(b"CONTENT\n")

        assert worktree_status(tmp_path, index_entry("a.txt")) == Status.WT_MODIFIED

    def test_size_change(self, tmp_path: Path) -> None:
        _ = (tmp_path / "a.txt").write_bytes(b"longer content\n")

        assert worktree_status(tmp_path, index_entry("a.txt")) == Status.WT_MODIFIED

    def test_deleted(self, tmp_path: Path) -> None:
        assert worktree_status(tmp_path, index_entry("a.txt")) == Status.WT_DELETED

    def test_parent_replaced_by_file(self, tmp_path: Path) -> None:
        _ = (tmp_path / "dir").write_bytes(b"now a file\n")

        status = worktree_status(tmp_path, index_entry("dir/a.txt"))

        assert status == Status.WT_DELETED

    def test_replaced_by_directory(self, tmp_path: Path) -> None:
        (tmp_path / "a.txt").mkdir()

        assert worktree_status(tmp_path, index_entry("a.txt")) == Status.WT_DELETED

    def test_file_replaced_by_symlink(self, tmp_path: Path) -> None:
        (tmp_path / "a.txt").symlink_to("elsewhere")

        status = worktree_status(tmp_path, index_entry("a.txt"))

        assert status == Status.WT_TYPECHANGE

    def test_symlink_target_compared(self, tmp_path: Path) -> None:
        (tmp_path / "link").symlink_to("target")
        same = index_entry("link", b"target", mode=SYMLINK_MODE)
        moved = index_entry("link", b"tarjet", mode=SYMLINK_MODE)

        assert worktree_status(tmp_path, same) == Status.CURRENT
        assert worktree_status(tmp_path, moved) == Status.WT_MODIFIED

    @pytest.mark.parametrize(
        ("filemode", "expected"),
        [(True, Status.WT_MODIFIED), (False, Status.CURRENT)],
    )
    def test_executable_bit(
        self, tmp_path: Path, filemode: bool, expected: Status
    ) -> None:
        path = tmp_path / "run.sh"
        _ = path.write_bytes(b"content\n")
        os.chmod(path, 0o755)  # noqa: PTH101

        status = worktree_status(tmp_path, index_entry("run.sh"), filemode=filemode)

        assert status == expected

    def test_gitlink_is_skipped(self, tmp_path: Path) -> None:
        entry = index_entry("vendor/lib", mode=GITLINK_MODE)

        assert worktree_status(tmp_path, entry) == Status.CURRENT

    def test_skip_worktree_is_skipped(self, tmp_path: Path) -> None:
        entry = index_entry("sparse.txt", extended_flags=CE_EXT_SKIP_WORKTREE)

        assert worktree_status(tmp_path, entry) == Status.CURRENT

    def test_intent_to_add_is_new(self, tmp_path: Path) -> None:
        _ = (tmp_path / "later.txt").write_bytes(b"content\n")
        entry = index_entry("later.txt", b"", extended_flags=CE_EXT_INTENT_TO_ADD)

        assert worktree_status(tmp_path, entry) == Status.WT_NEW


class TestCollectStatuses:
    @pytest.fixture
    def rules(self, tmp_path: Path) -> IgnoreRules:
        return IgnoreRules.for_repository(
            tmp_path, tmp_path / ".git", tmp_path / "no-global-ignore"
        )

    def test_untracked_file_and_directory(
        self, tmp_path: Path, rules: IgnoreRules
    ) -> None:
        (tmp_path / ".git").mkdir()
        _ = (tmp_path / "notes.txt").write_text("x")
        (tmp_path / "new" / "deep").mkdir(parents=True)
        _ = (tmp_path / "new" / "deep" / "a.txt").write_text("x")
        _ = (tmp_path / "new" / "b.txt").write_text("x")

        entries = collect_statuses(tmp_path, {}, snapshot(), rules=rules)

        assert entries == [
            StatusEntry(path="new/", status=Status.WT_NEW),
            StatusEntry(path="notes.txt", status=Status.WT_NEW),
        ]

    def test_untracked_skipped_without_rules(self, tmp_path: Path) -> None:
        _ = (tmp_path / "notes.txt").write_text("x")

        assert collect_statuses(tmp_path, {}, snapshot()) == []

    def test_ignored_paths_are_not_reported(
        self, tmp_path: Path, rules: IgnoreRules
    ) -> None:
        _ = (tmp_path / ".gitignore").write_text("*.log\nbuild/\n")
        _ = (tmp_path / "debug.log").write_text("x")
        (tmp_path / "build").mkdir()
        _ = (tmp_path / "build" / "out.o").write_text("x")
        (tmp_path / "logs").mkdir()
        _ = (tmp_path / "logs" / "today.log").write_text("x")

        entries = collect_statuses(tmp_path, {}, snapshot(), rules=rules)

        assert entries == [StatusEntry(path=".gitignore", status=Status.WT_NEW)]

    def test_untracked_file_in_tracked_directory(
        self, tmp_path: Path, rules: IgnoreRules
    ) -> None:
        (tmp_path / "src").mkdir()
        tracked = tmp_path / "src" / "main.py"
        _ = tracked.write_bytes(b"content\n")
        _ = (tmp_path / "src" / "extra.py").write_text("x")
        entry = index_entry("src/main.py", stat_of=tracked)
        index = snapshot(entry, mtime=later_than(tracked))

        entries = collect_statuses(tmp_path, tree_of(entry), index, rules=rules)

        assert entries == [StatusEntry(path="src/extra.py", status=Status.WT_NEW)]

    def test_nested_repository_is_untracked(
        self, tmp_path: Path, rules: IgnoreRules
    ) -> None:
        (tmp_path / "other" / ".git").mkdir(parents=True)

        entries = collect_statuses(tmp_path, {}, snapshot(), rules=rules)

        assert entries == [StatusEntry(path="other/", status=Status.WT_NEW)]

    def test_empty_directory_is_not_reported(
        self, tmp_path: Path, rules: IgnoreRules
    ) -> None:
        (tmp_path / "empty" / "nested").mkdir(parents=True)

        assert collect_statuses(tmp_path, {}, snapshot(), rules=rules) == []

    def test_staged_and_modified_path_carries_both_flags(
        self, tmp_path: Path
    ) -> None:
        _ = (tmp_path / "a.txt").write_bytes(b"third\n")
        head = tree_of(index_entry("a.txt", b"first\n"))
        index = snapshot(index_entry("a.txt", b"second\n"))

        entries = collect_statuses(tmp_path, head, index)

        assert entries == [
            StatusEntry(
                path="a.txt", status=Status.INDEX_MODIFIED | Status.WT_MODIFIED
            )
        ]

    def test_unreadable_worktree_is_fatal(self, tmp_path: Path) -> None:
        rules = IgnoreRules.for_repository(tmp_path, tmp_path, tmp_path / "none")

        with pytest.raises(StatusEnumerationError):
            _ = collect_statuses(tmp_path / "missing", {}, snapshot(), rules=rules)


class TestReadIndex:
    def test_missing_index_is_empty(self, tmp_path: Path) -> None:
        index = read_index(tmp_path / "index")

        assert index.entries == {}
        assert index.mtime is None

    @pytest.mark.parametrize(
        "content", [b"", b"JUNK", b"DIRC\x00\x00\x00\x09\x00\x00\x00\x00"]
    )
    def test_corrupt_index_is_fatal(self, tmp_path: Path, content: bytes) -> None:
        path = tmp_path / "index"
        _ = path.write_bytes(content)

        with pytest.raises(StatusEnumerationError):
            _ = read_index(path)

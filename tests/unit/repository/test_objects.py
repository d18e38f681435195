"""Tests for commit parsing and blob hashing."""

import pytest

from gitprompt.repository._objects import blob_sha, parse_commit

TREE = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
PARENT = "9fceb02d0ae598e95dc970b74767f19372d61af8"
OTHER = "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"


def raw_commit(*parents: str, committer_time: int = 1700000000) -> bytes:
    lines = [f"tree {TREE}"]
    lines += [f"parent {parent}" for parent in parents]
    lines += [
        "author A U Thor <author@example.com> 1600000000 +0000",
        f"committer C O Mitter <committer@example.com> {committer_time} +0100",
        "",
        "subject line",
        "",
        "parent not-a-header",
    ]
    return "\n".join(lines).encode()


class TestParseCommit:
    def test_root_commit(self) -> None:
        commit = parse_commit(raw_commit())

        assert commit.tree == TREE
        assert commit.parents == ()
        assert commit.time == 1700000000

    def test_merge_commit_keeps_parent_order(self) -> None:
        commit = parse_commit(raw_commit(PARENT, OTHER))

        assert commit.parents == (PARENT, OTHER)

    def test_message_is_not_parsed(self) -> None:
        assert parse_commit(raw_commit(PARENT)).parents == (PARENT,)

    def test_missing_tree(self) -> None:
        with pytest.raises(ValueError, match="no tree"):
            _ = parse_commit(b"parent " + PARENT.encode() + b"\n\nmessage")

    def test_malformed_committer(self) -> None:
        with pytest.raises(ValueError):
            _ = parse_commit(f"tree {TREE}\ncommitter nobody\n\n".encode())


class TestBlobSha:
    def test_empty_blob(self) -> None:
        assert blob_sha(b"").hex() == "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"

    def test_known_content(self) -> None:
        # git hash-object of "hello\n"
        assert blob_sha(b"hello\n").hex() == "ce013625030ba8dba906f756967f9e9ca394464a"

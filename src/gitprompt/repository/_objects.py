"""Read-only access to the git object database.

Objects are read with gitdb, the object layer GitPython itself is built on,
so that no query depends on the git executable. Commits are parsed only as
far as ancestry needs: their tree, parents and committer time.
"""

import hashlib
import zlib
from dataclasses import dataclass
from pathlib import Path  # noqa: TC003 - Used at runtime in __init__
from typing import Final

from git.objects.fun import traverse_tree_recursive
from gitdb import GitDB
from gitdb.exc import ODBError
from gitdb.util import hex_to_bin

from gitprompt.exceptions import ObjectReadError

COMMIT_TYPE: Final = b"commit"


def blob_sha(data: bytes) -> bytes:
    """Return the binary object id git assigns to a blob with ``data``."""
    header = b"blob %d\0" % len(data)
    return hashlib.sha1(header + data, usedforsecurity=False).digest()


@dataclass(frozen=True, slots=True)
class CommitInfo:
    """The parts of a commit that the graph walk needs.

    Attributes:
        tree: Hex id of the root tree.
        parents: Hex ids of the parent commits, in order.
        time: Committer timestamp in seconds since the epoch.
    """

    tree: str
    parents: tuple[str, ...]
    time: int


def parse_commit(data: bytes) -> CommitInfo:
    """Parse the header of a raw commit object.

    Args:
        data: Commit object contents, without the loose-object header.

    Returns:
        The commit's tree, parents and committer time.

    Raises:
        ValueError: If the tree line is missing or a header is malformed.
    """
    header, _, _ = data.partition(b"\n\n")
    tree: str | None = None
    parents: list[str] = []
    time = 0
    for line in header.split(b"\n"):
        key, _, value = line.partition(b" ")
        if key == b"tree":
            tree = value.decode("ascii")
        elif key == b"parent":
            parents.append(value.decode("ascii"))
        elif key == b"committer":
            # "Name <email> 1700000000 +0100"
            fields = value.rsplit(b" ", 2)
            if len(fields) != 3:  # noqa: PLR2004
                msg = "Malformed committer line"
                raise ValueError(msg)
            time = int(fields[1])
    if tree is None:
        msg = "Commit has no tree"
        raise ValueError(msg)
    return CommitInfo(tree=tree, parents=tuple(parents), time=time)


class ObjectStore:
    """Cached reads from a repository's object directory.

    Example:
        >>> store = ObjectStore(Path(".git/objects"))
        >>> store.commit(head_sha).parents
        ('9fceb02d0ae598e95dc970b74767f19372d61af8',)
    """

    __slots__: Final = ("_commits", "_db")

    def __init__(self, objects_dir: Path) -> None:
        self._db = GitDB(str(objects_dir))
        self._commits: dict[str, CommitInfo] = {}

    def commit(self, sha: str) -> CommitInfo:
        """Load a commit.

        Args:
            sha: Full hex id of the commit.

        Returns:
            The parsed commit header.

        Raises:
            ObjectReadError: If the object is missing, is not a commit, or
                cannot be parsed.
        """
        if sha in self._commits:
            return self._commits[sha]
        try:
            stream = self._db.stream(hex_to_bin(sha))
            if stream.type != COMMIT_TYPE:
                msg = f"Object '{sha}' is a {stream.type.decode()}, not a commit"
                raise ObjectReadError(msg, sha=sha)
            info = parse_commit(stream.read())
        except (ODBError, OSError, ValueError, zlib.error) as e:
            msg = f"Commit '{sha}' cannot be read"
            raise ObjectReadError(msg, sha=sha) from e
        self._commits[sha] = info
        return info

    def tree_entries(self, sha: str) -> dict[str, tuple[int, bytes]]:
        """Flatten a tree into its non-directory entries.

        Args:
            sha: Hex id of the root tree.

        Returns:
            Mapping of slash-separated path to ``(mode, binary id)``.

        Raises:
            ObjectReadError: If the tree or one of its subtrees is unreadable.
        """
        try:
            entries = traverse_tree_recursive(self._db, hex_to_bin(sha), "")
        except (ODBError, OSError, ValueError, zlib.error) as e:
            msg = f"Tree '{sha}' cannot be read"
            raise ObjectReadError(msg, sha=sha) from e
        return {path: (mode, binsha) for binsha, mode, path in entries}

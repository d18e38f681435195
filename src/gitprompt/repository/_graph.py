"""Ahead/behind counting over the commit graph.

Both tips are walked newest first, each commit carrying a mark for the side
or sides it is reachable from. The walk stops once every queued commit is
reachable from both tips, at which point no unvisited commit can be unique
to either side.
"""

import heapq
from collections.abc import Callable
from itertools import count
from typing import Final

from gitprompt.repository._objects import CommitInfo

LEFT: Final = 1
RIGHT: Final = 2
BOTH: Final = LEFT | RIGHT


def count_ahead_behind(
    local: str,
    upstream: str,
    read_commit: Callable[[str], CommitInfo],
) -> tuple[int, int]:
    """Count commits unique to each side of ``local...upstream``.

    Args:
        local: Hex id of the local tip.
        upstream: Hex id of the upstream tip.
        read_commit: Loads a commit by hex id. Errors it raises propagate.

    Returns:
        ``(ahead, behind)``: commits reachable only from ``local`` and
        commits reachable only from ``upstream``.
    """
    if local == upstream:
        return 0, 0

    marks: dict[str, int] = {local: LEFT, upstream: RIGHT}
    queue: list[tuple[int, int, str]] = []
    order = count()

    def push(sha: str) -> None:
        # Max-heap on commit time; insertion order breaks ties
        heapq.heappush(queue, (-read_commit(sha).time, next(order), sha))

    push(local)
    push(upstream)

    while queue and any(marks[sha] != BOTH for _, _, sha in queue):
        _, _, sha = heapq.heappop(queue)
        side = marks[sha]
        for parent in read_commit(sha).parents:
            merged = marks.get(parent, 0) | side
            if merged != marks.get(parent):
                marks[parent] = merged
                push(parent)

    ahead = sum(1 for mark in marks.values() if mark == LEFT)
    behind = sum(1 for mark in marks.values() if mark == RIGHT)
    return ahead, behind

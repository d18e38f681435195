"""Status line formatting.

The line is a fixed sequence of colored segments::

    RESET label [RED <behind] [CYAN >ahead] BLACK /
    [YELLOW -staged] [RED !conflicts] [BLUE +changed] [MAGENTA _untracked]
    [GREEN =]  (only when every count is zero)
    BLACK " :: " RESET

Color directives are ANSI bold codes wrapped in zsh's ``%{...%}`` so the
prompt treats them as zero-width. Prompt themes parse the markers, so their
characters and order are fixed.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from gitprompt.enums import Bucket, Color

if TYPE_CHECKING:
    from collections.abc import Mapping

    from gitprompt.status._models import Counts, Divergence


def _directive(code: str) -> str:
    return f"%{{\x1b[{code}m%}}"


ESCAPES: Final[Mapping[Color, str]] = MappingProxyType(
    {
        Color.BLACK: _directive("30;1"),
        Color.RED: _directive("31;1"),
        Color.GREEN: _directive("32;1"),
        Color.YELLOW: _directive("33;1"),
        Color.BLUE: _directive("34;1"),
        Color.MAGENTA: _directive("35;1"),
        Color.CYAN: _directive("36;1"),
        Color.RESET: _directive("0"),
    }
)

BEHIND_MARKER: Final = "<"
AHEAD_MARKER: Final = ">"
SEPARATOR: Final = "/"
CLEAN_MARKER: Final = "="
TRAILER: Final = " :: "

# Display order differs from classification priority
COUNT_SEGMENTS: Final[tuple[tuple[Bucket, Color, str], ...]] = (
    (Bucket.STAGED, Color.YELLOW, "-"),
    (Bucket.CONFLICTS, Color.RED, "!"),
    (Bucket.CHANGED, Color.BLUE, "+"),
    (Bucket.UNTRACKED, Color.MAGENTA, "_"),
)


def format_report(label: str, divergence: Divergence, counts: Counts) -> str:
    """Render the status line.

    Args:
        label: Branch label.
        divergence: Ahead/behind counts.
        counts: Per-bucket counts.

    Returns:
        The status line without a trailing newline.
    """
    parts = [ESCAPES[Color.RESET], label]

    if divergence.behind > 0:
        parts.append(f"{ESCAPES[Color.RED]}{BEHIND_MARKER}{divergence.behind}")
    if divergence.ahead > 0:
        parts.append(f"{ESCAPES[Color.CYAN]}{AHEAD_MARKER}{divergence.ahead}")

    parts.append(f"{ESCAPES[Color.BLACK]}{SEPARATOR}")

    clean = True
    for bucket, color, marker in COUNT_SEGMENTS:
        count = counts.get(bucket)
        if count > 0:
            clean = False
            parts.append(f"{ESCAPES[color]}{marker}{count}")

    if clean:
        parts.append(f"{ESCAPES[Color.GREEN]}{CLEAN_MARKER}")

    parts.append(f"{ESCAPES[Color.BLACK]}{TRAILER}{ESCAPES[Color.RESET]}")
    return "".join(parts)

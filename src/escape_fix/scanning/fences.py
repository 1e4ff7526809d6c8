"""Line-oriented fenced code block scanner.

The scanner is a two-state machine::

    OUTSIDE --open fence (char, n)--> INSIDE(char, n)
    INSIDE(char, n) --close fence (char, m >= n)--> OUTSIDE

Every other line is a self-transition: it either passes through untouched
(``OUTSIDE``) or becomes content of the current region (``INSIDE``). Reaching
end of file while ``INSIDE`` is an error.

Fence rules follow CommonMark: a backtick fence's info string may not contain
backticks, and a closing fence carries no info string. Fences nested inside a
region with a shorter run, or made of the other fence character, are content.
"""

import re
from typing import List, Optional, Sequence, Tuple

from ..errors import UnterminatedFenceError
from .models import CodeRegion, strip_terminator


OPEN_FENCE_RE = re.compile(r"^(?P<indent>\s*)(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
CLOSE_FENCE_RE = re.compile(r"^\s*(?P<fence>`{3,}|~{3,})\s*$")


def match_open_fence(line: str) -> Optional[Tuple[str, str, str]]:
    """Return ``(indent, fence, info)`` if ``line`` opens a fenced block."""
    match = OPEN_FENCE_RE.match(strip_terminator(line))
    if not match:
        return None
    fence = match.group("fence")
    info = match.group("info")
    if fence[0] == "`" and "`" in info:
        # Inline code such as ```foo``` is not a fence
        return None
    return match.group("indent"), fence, info.strip()


def closes_fence(line: str, delimiter: str) -> bool:
    """Whether ``line`` closes a region opened with ``delimiter``."""
    match = CLOSE_FENCE_RE.match(strip_terminator(line))
    if not match:
        return False
    fence = match.group("fence")
    return fence[0] == delimiter[0] and len(fence) >= len(delimiter)


class FenceScanner:
    """Classifies the lines of one file into fenced code regions."""

    def __init__(self, lines: Sequence[str]):
        self.lines = lines
        self._open: Optional[CodeRegion] = None

    @property
    def inside(self) -> bool:
        return self._open is not None

    def scan(self) -> List[CodeRegion]:
        """Return the ordered, non-overlapping code regions of the file.

        Raises:
            UnterminatedFenceError: If the file ends inside a region.
        """
        regions: List[CodeRegion] = []
        self._open = None

        for index, line in enumerate(self.lines):
            region = self.feed(index, line)
            if region is not None:
                regions.append(region)

        if self._open is not None:
            raise UnterminatedFenceError(self._open.start + 1, self._open.delimiter)
        return regions

    def feed(self, index: int, line: str) -> Optional[CodeRegion]:
        """Advance the state machine by one line.

        Returns the region that ``line`` closes, if any.
        """
        if self._open is None:
            opened = match_open_fence(line)
            if opened:
                indent, fence, info = opened
                self._open = CodeRegion(start=index, end=index, delimiter=fence, info=info, indent=indent)
            return None

        if closes_fence(line, self._open.delimiter):
            region, self._open = self._open, None
            region.end = index
            return region
        return None


def scan_regions(lines: Sequence[str]) -> List[CodeRegion]:
    """Convenience wrapper around :class:`FenceScanner`."""
    return FenceScanner(lines).scan()

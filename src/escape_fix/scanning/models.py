"""Data models for scanned source files and their fenced code regions."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class CodeRegion:
    """A fenced code block, from its open fence line to its close fence line."""
    start: int  # 0-based index of the open fence line
    end: int  # 0-based index of the close fence line (inclusive)
    delimiter: str  # fence run as written on the open line, e.g. "```" or "~~~~"
    info: str = ""  # info string after the open fence, e.g. "js"
    indent: str = ""  # leading whitespace of the open fence
    already_escaped: bool = False
    has_conflict: bool = False
    conflict_lines: List[int] = field(default_factory=list)
    end_marker_lines: List[int] = field(default_factory=list)  # content lines holding the end marker

    @property
    def fence_length(self) -> int:
        """Length of the opening fence run."""
        return len(self.delimiter)

    @property
    def body(self) -> range:
        """Indexes of the content lines between the two fences."""
        return range(self.start + 1, self.end)

    @property
    def line_range(self) -> str:
        """1-based inclusive line range for messages, e.g. ``12-18``."""
        return f"{self.start + 1}-{self.end + 1}"

    @property
    def needs_escape(self) -> bool:
        """Whether this region should be wrapped with a marker pair."""
        return self.has_conflict and not self.already_escaped and self.wrappable

    @property
    def wrappable(self) -> bool:
        """False when a content line holds the end marker, which would close the wrapping span early."""
        return not self.end_marker_lines


@dataclass
class MarkerSpan:
    """A run of lines protected by whole-line begin/end markers outside code."""
    begin: int  # 0-based index of the begin marker line
    end: Optional[int] = None  # 0-based index of the end marker line, None if never closed

    @property
    def closed(self) -> bool:
        return self.end is not None

    def covers(self, region: CodeRegion) -> bool:
        """True if the span opens before ``region`` and closes after it."""
        return self.closed and self.begin < region.start and self.end > region.end


@dataclass
class SourceFile:
    """A text file loaded for one processing pass.

    ``lines`` keep their own terminators so that ``''.join(lines)`` reproduces
    the file byte for byte.
    """
    path: Path
    lines: List[str]
    regions: List[CodeRegion] = field(default_factory=list)

    @classmethod
    def from_text(cls, path: Path, text: str) -> "SourceFile":
        return cls(path=Path(path), lines=split_lines(text))

    @property
    def text(self) -> str:
        return "".join(self.lines)

    @property
    def newline(self) -> str:
        """The file's line terminator, taken from its first terminated line."""
        for line in self.lines:
            if line.endswith("\r\n"):
                return "\r\n"
            if line.endswith("\n"):
                return "\n"
        return "\n"


def split_lines(text: str) -> List[str]:
    """Split ``text`` on ``\\n`` only, keeping terminators.

    ``str.splitlines`` also breaks on form feeds and Unicode separators, which
    Markdown does not treat as line breaks.
    """
    parts = text.split("\n")
    tail = parts.pop()
    lines = [part + "\n" for part in parts]
    if tail:
        lines.append(tail)
    return lines


def strip_terminator(line: str) -> str:
    """Remove a trailing ``\\n`` or ``\\r\\n`` from ``line``."""
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line

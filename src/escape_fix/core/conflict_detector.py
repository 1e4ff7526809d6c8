"""Template conflict detection for fenced code regions."""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Pattern, Sequence

from ..scanning.models import CodeRegion, MarkerSpan, strip_terminator


# A Liquid output tag opener that is not the start of a ``{{%`` sequence
OUTPUT_TAG_RE = re.compile(r"\{\{(?!%)")
# A Liquid tag such as ``{% if %}``; may be unclosed on the line
PERCENT_TAG_RE = re.compile(r"\{%")


@dataclass
class MarkerReport:
    """Whole-line marker layout of a file, outside its code regions."""
    spans: List[MarkerSpan] = field(default_factory=list)
    stray_ends: List[int] = field(default_factory=list)  # end markers closing nothing
    nested_begins: List[int] = field(default_factory=list)  # begin markers inside an open span

    @property
    def unclosed(self) -> List[MarkerSpan]:
        return [span for span in self.spans if not span.closed]

    def covering(self, region: CodeRegion) -> Optional[MarkerSpan]:
        for span in self.spans:
            if span.covers(region):
                return span
        return None

    def warnings(self) -> List[str]:
        """Human readable descriptions of unbalanced markers (1-based lines)."""
        messages = [f"line {span.begin + 1}: begin marker is never closed" for span in self.unclosed]
        messages.extend(f"line {index + 1}: end marker without a matching begin marker"
                        for index in self.stray_ends)
        messages.extend(f"line {index + 1}: begin marker inside an already open raw span"
                        for index in self.nested_begins)
        return messages


class ConflictDetector:
    """Classifies code regions against a begin/end marker pair.

    Detection is textual: any ``{{`` not directly followed by ``%`` and any
    ``{%`` tag is a conflict, unless it sits inside an inline begin...end
    marker pair on the same line. A marker left unpaired on a code line is a
    conflict too. The pattern set is broad on purpose; a reviewed false
    positive is silenced through ``ignore_patterns``.
    """

    def __init__(self, begin_marker: str, end_marker: str,
                 ignore_patterns: Optional[Iterable[Pattern]] = None):
        self.begin_marker = begin_marker
        self.end_marker = end_marker
        self.ignore_patterns = list(ignore_patterns or [])
        self._marker_re = re.compile(f"{re.escape(begin_marker)}|{re.escape(end_marker)}")
        # Shortest begin...end run on one line, i.e. an inline protected span
        self._inline_pair_re = re.compile(f"{re.escape(begin_marker)}.*?{re.escape(end_marker)}")

    def is_begin(self, line: str) -> bool:
        return strip_terminator(line).strip() == self.begin_marker

    def is_end(self, line: str) -> bool:
        return strip_terminator(line).strip() == self.end_marker

    def line_has_conflict(self, line: str) -> bool:
        """Check one content line for template directive syntax."""
        text = self._inline_pair_re.sub("", strip_terminator(line))
        if self._marker_re.search(text):
            return True
        if not (OUTPUT_TAG_RE.search(text) or PERCENT_TAG_RE.search(text)):
            return False
        return not any(pattern.search(text) for pattern in self.ignore_patterns)

    def is_already_escaped(self, lines: Sequence[str], region: CodeRegion) -> bool:
        """True iff the region sits directly between a begin and an end marker line."""
        if region.start == 0 or region.end + 1 >= len(lines):
            return False
        return self.is_begin(lines[region.start - 1]) and self.is_end(lines[region.end + 1])

    def classify(self, lines: Sequence[str], region: CodeRegion) -> CodeRegion:
        """Fill in ``has_conflict``, ``already_escaped``, ``conflict_lines`` and ``end_marker_lines``."""
        region.conflict_lines = [index for index in region.body if self.line_has_conflict(lines[index])]
        region.has_conflict = bool(region.conflict_lines)
        region.end_marker_lines = [index for index in region.body if self.end_marker in lines[index]]
        region.already_escaped = self.is_already_escaped(lines, region)
        return region

    def classify_all(self, lines: Sequence[str], regions: Iterable[CodeRegion]) -> List[CodeRegion]:
        return [self.classify(lines, region) for region in regions]

    def unwrappable_warnings(self, regions: Iterable[CodeRegion]) -> List[str]:
        """Describe conflicting regions that hold the end marker and are left as they are."""
        return [
            f"lines {region.line_range}: code block contains the end marker on line "
            f"{region.end_marker_lines[0] + 1} and cannot be wrapped; escape it by hand"
            for region in regions
            if region.has_conflict and not region.already_escaped and not region.wrappable
        ]

    def analyze_markers(self, lines: Sequence[str], regions: Sequence[CodeRegion]) -> MarkerReport:
        """Pair whole-line markers found outside code regions into raw spans.

        Marker text inside a code region is example content, not a marker.
        The renderer does not nest raw spans, so a begin marker inside an open
        span is literal text and gets reported.
        """
        report = MarkerReport()
        in_code = set()
        for region in regions:
            in_code.update(range(region.start, region.end + 1))

        current: Optional[MarkerSpan] = None
        for index, line in enumerate(lines):
            if index in in_code:
                continue
            if self.is_begin(line):
                if current is None:
                    current = MarkerSpan(begin=index)
                    report.spans.append(current)
                else:
                    report.nested_begins.append(index)
            elif self.is_end(line):
                if current is None:
                    report.stray_ends.append(index)
                else:
                    current.end = index
                    current = None
        return report

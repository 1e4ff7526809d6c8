"""Escape marker injection around conflicting code regions."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..scanning.models import CodeRegion, MarkerSpan
from .conflict_detector import ConflictDetector, MarkerReport


@dataclass
class Injection:
    """Marker lines to add around one region."""
    region: CodeRegion
    add_begin: bool = True
    add_end: bool = True

    @property
    def is_repair(self) -> bool:
        """True when one half of the pair already existed and was reused."""
        return not (self.add_begin and self.add_end)


@dataclass
class InjectionResult:
    """New line sequence plus what changed."""
    lines: List[str]
    injections: List[Injection] = field(default_factory=list)

    @property
    def changed_regions(self) -> List[CodeRegion]:
        return [injection.region for injection in self.injections]

    @property
    def changed(self) -> bool:
        return bool(self.injections)


class EscapeInjector:
    """Wraps classified code regions in whole-line begin/end markers.

    Markers go immediately outside the fence lines, never inside the fenced
    span. The input sequence is never mutated.
    """

    def __init__(self, detector: ConflictDetector):
        self.detector = detector

    def plan(self, lines: Sequence[str], regions: Sequence[CodeRegion],
             report: Optional[MarkerReport] = None) -> List[Injection]:
        """Decide which regions get markers and which halves are missing.

        Args:
            lines: File lines.
            regions: Regions already classified by the detector.
            report: Marker layout; computed when not given.

        Returns:
            List[Injection]: One entry per region to change, in file order.
        """
        if report is None:
            report = self.detector.analyze_markers(lines, regions)

        stray_ends = set(report.stray_ends)
        open_spans: List[MarkerSpan] = list(report.unclosed)
        plan = []

        for region in regions:
            if not region.needs_escape or report.covering(region) is not None:
                continue

            # An unclosed span before the region already protects it; closing
            # the span right after the region balances the file.
            enclosing = next((span for span in open_spans if span.begin < region.start), None)
            if enclosing is not None:
                open_spans.remove(enclosing)
                plan.append(Injection(region, add_begin=False, add_end=True))
                continue

            add_end = (region.end + 1) not in stray_ends
            plan.append(Injection(region, add_begin=True, add_end=add_end))

        return plan

    def inject(self, lines: Sequence[str], regions: Sequence[CodeRegion],
               newline: str = "\n", report: Optional[MarkerReport] = None) -> InjectionResult:
        """Return a new line list with markers inserted.

        Args:
            lines: File lines, each keeping its terminator.
            regions: Regions already classified by the detector.
            newline: Terminator for inserted lines when the fence line has none.
            report: Marker layout; computed when not given.
        """
        plan = self.plan(lines, regions, report)
        before: Dict[int, str] = {}
        after: Dict[int, str] = {}

        for injection in plan:
            region = injection.region
            eol = _terminator(lines[region.start]) or newline
            if injection.add_begin:
                before[region.start] = f"{region.indent}{self.detector.begin_marker}{eol}"
            if injection.add_end:
                after[region.end] = f"{region.indent}{self.detector.end_marker}"

        new_lines: List[str] = []
        for index, line in enumerate(lines):
            if index in before:
                new_lines.append(before[index])
            if index in after:
                eol = _terminator(line)
                if eol:
                    new_lines.append(line)
                    new_lines.append(after[index] + eol)
                else:
                    # Close fence is the unterminated last line; keep the file
                    # ending without a terminator
                    new_lines.append(line + newline)
                    new_lines.append(after[index])
            else:
                new_lines.append(line)

        return InjectionResult(lines=new_lines, injections=plan)


def _terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return "\r\n"
    if line.endswith("\n"):
        return "\n"
    return ""

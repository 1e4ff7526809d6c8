"""Repair of brace escapes and mangled raw markers left by older tooling.

Earlier fix scripts replaced ``{{``/``}}`` with ``&#123;&#123;``/``&#125;&#125;``
inside code blocks, and repeated runs produced hybrids such as ``{{#123;``.
Kramdown renders entity text verbatim inside code, so the examples showed
the entities. Reverting them to literal braces (and then wrapping the block
in raw markers) restores the intended code.
"""

import re
from typing import List, Sequence, Tuple

from ..scanning.models import CodeRegion


# Order matters: nested hybrids first, then doubled entities, then singles
ENTITY_REPAIRS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"\{\{#123;\{\{#123;"), "{{"),
    (re.compile(r"\}\}#125;\}\}#125;"), "}}"),
    (re.compile(r"\{\{#123;"), "{{"),
    (re.compile(r"\}\}#125;"), "}}"),
    (re.compile(r"&#123;&#123;"), "{{"),
    (re.compile(r"&#125;&#125;"), "}}"),
    (re.compile(r"&#x7[bB];&#x7[bB];"), "{{"),
    (re.compile(r"&#x7[dD];&#x7[dD];"), "}}"),
]


def revert_entities_in_line(line: str) -> str:
    """Revert brace entity artifacts in a single line."""
    return _apply_until_stable(line, ENTITY_REPAIRS)


def _apply_until_stable(line: str, repairs: Sequence[Tuple[re.Pattern, str]]) -> str:
    # One repair can expose another, so repeat until the line stops changing
    while True:
        repaired = line
        for pattern, replacement in repairs:
            repaired = pattern.sub(replacement, repaired)
        if repaired == line:
            return line
        line = repaired


def revert_entities(lines: Sequence[str], regions: Sequence[CodeRegion]) -> Tuple[List[str], List[int]]:
    """Revert entity artifacts on the content lines of ``regions`` only.

    Fence lines and text outside code are never touched, so the region
    indexes stay valid for the returned list.

    Returns:
        (new_lines, changed_line_indexes)
    """
    new_lines = list(lines)
    changed = []
    for region in regions:
        for index in region.body:
            repaired = revert_entities_in_line(new_lines[index])
            if repaired != new_lines[index]:
                new_lines[index] = repaired
                changed.append(index)
    return new_lines, changed


def marker_artifact_repairs(begin_marker: str, end_marker: str) -> List[Tuple[re.Pattern, str]]:
    """Patterns for mangled copies of Liquid tag markers.

    Earlier brace substitutions turned ``{% raw %}`` into ``{{% raw %}`` and
    ``{% endraw %}`` into ``% endraw %}}``. Liquid reads the former as an
    unterminated variable, so the build fails on it. Markers that are not
    Liquid tags have no such artifacts.
    """
    repairs = []
    if begin_marker.startswith("{%"):
        repairs.append((re.compile(re.escape("{" + begin_marker)), begin_marker))
    if end_marker.startswith("{%") and end_marker.endswith("}"):
        # Not preceded by "{", or a well-formed marker followed by "}" would match
        repairs.append((re.compile(r"(?<!\{)" + re.escape(end_marker[1:] + "}")), end_marker))
    return repairs


def repair_marker_artifacts(lines: Sequence[str], begin_marker: str,
                            end_marker: str) -> Tuple[List[str], List[int]]:
    """Restore mangled begin/end markers on every line of the file.

    Returns:
        (new_lines, changed_line_indexes)
    """
    repairs = marker_artifact_repairs(begin_marker, end_marker)
    new_lines = list(lines)
    changed = []
    for index, line in enumerate(new_lines):
        repaired = _apply_until_stable(line, repairs)
        if repaired != line:
            new_lines[index] = repaired
            changed.append(index)
    return new_lines, changed

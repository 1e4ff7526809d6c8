from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Callable

import pytest

from escape_fix.core.conflict_detector import ConflictDetector
from escape_fix.core.injector import EscapeInjector
from escape_fix.scanning.fences import scan_regions
from escape_fix.scanning.models import split_lines


JSX_DOC = (
    "# Styling\n"
    "\n"
    "Inline styles use an object literal:\n"
    "\n"
    "```js\n"
    "<View style={{flex:1}} />\n"
    "```\n"
    "\n"
    "That is all.\n"
)

JSX_DOC_ESCAPED = (
    "# Styling\n"
    "\n"
    "Inline styles use an object literal:\n"
    "\n"
    "{% raw %}\n"
    "```js\n"
    "<View style={{flex:1}} />\n"
    "```\n"
    "{% endraw %}\n"
    "\n"
    "That is all.\n"
)

PLAIN_DOC = (
    "# Arrays\n"
    "\n"
    "```js\n"
    "const items = [1, 2, 3];\n"
    "const total = items.reduce((a, b) => a + b, 0);\n"
    "```\n"
)

UNTERMINATED_DOC = (
    "# Broken\n"
    "\n"
    "```js\n"
    "<View style={{flex:1}} />\n"
)


@pytest.fixture
def samples() -> SimpleNamespace:
    return SimpleNamespace(
        jsx=JSX_DOC,
        jsx_escaped=JSX_DOC_ESCAPED,
        plain=PLAIN_DOC,
        unterminated=UNTERMINATED_DOC,
    )


@pytest.fixture
def detector() -> ConflictDetector:
    return ConflictDetector("{% raw %}", "{% endraw %}")


@pytest.fixture
def escape(detector) -> Callable[[str], str]:
    """Run scan, classify and inject over a text and return the new text."""
    injector = EscapeInjector(detector)

    def _escape(text: str) -> str:
        lines = split_lines(text)
        regions = detector.classify_all(lines, scan_regions(lines))
        return "".join(injector.inject(lines, regions).lines)

    return _escape


@pytest.fixture
def corpus(tmp_path: Path) -> Path:
    """A small documentation tree with build output and VCS directories."""
    root = tmp_path / "docs"
    (root / "react-native").mkdir(parents=True)
    (root / "javascript").mkdir()
    (root / "_site").mkdir()
    (root / ".git").mkdir()

    (root / "react-native" / "styling.md").write_text(JSX_DOC, encoding="utf-8")
    (root / "javascript" / "arrays.md").write_text(PLAIN_DOC, encoding="utf-8")
    (root / "javascript" / "escaped.md").write_text(JSX_DOC_ESCAPED, encoding="utf-8")
    (root / "_site" / "styling.md").write_text(JSX_DOC, encoding="utf-8")
    (root / ".git" / "notes.md").write_text(JSX_DOC, encoding="utf-8")
    (root / "notes.txt").write_text(JSX_DOC, encoding="utf-8")
    return root


@pytest.fixture
def python_command() -> Callable[[str], str]:
    """Build a shell command running a Python snippet, standing in for the site build."""

    def _command(code: str) -> str:
        return f'"{sys.executable}" -c "{code}"'

    return _command


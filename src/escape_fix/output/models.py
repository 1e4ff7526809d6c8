"""Data models for processing results and run summaries."""

import re
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from ..scanning.models import CodeRegion


class ProcessingStatus(Enum):
    """Outcome of processing one file."""
    CHANGED = "changed"
    WOULD_CHANGE = "would change"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ProcessingResult:
    """Result of one file's pass."""
    path: Path
    status: ProcessingStatus
    changed_regions: List[CodeRegion] = field(default_factory=list)
    backup_path: Optional[Path] = None
    error: Optional[Exception] = None
    warnings: List[str] = field(default_factory=list)
    entity_repairs: int = 0  # lines whose entity escapes or mangled markers were repaired
    replaced_backup: bool = False  # an older backup from a previous run was overwritten

    @property
    def unchanged(self) -> bool:
        """True when the file on disk is byte-identical to its input."""
        return self.status != ProcessingStatus.CHANGED

    @property
    def failed(self) -> bool:
        return self.status == ProcessingStatus.FAILED

    @property
    def line_ranges(self) -> List[str]:
        return [region.line_range for region in self.changed_regions]


@dataclass
class BuildResult:
    """Outcome of one downstream build invocation."""
    command: str
    passed: bool
    returncode: Optional[int] = None
    output: str = ""
    duration: float = 0.0
    timed_out: bool = False
    reason: Optional[str] = None  # set when the build could not be run at all

    ERROR_LINE_RE = re.compile(r"Liquid|Error")

    def error_lines(self, limit: int = 10) -> List[str]:
        """Lines of build output that mention Liquid or an error."""
        matches = [line for line in self.output.splitlines() if self.ERROR_LINE_RE.search(line)]
        return matches[:limit]

    def describe(self) -> str:
        if self.passed:
            return f"Build passed in {self.duration:.1f}s"
        if self.timed_out:
            return f"Build timed out after {self.duration:.1f}s: {self.command}"
        if self.reason:
            return f"Build could not run: {self.reason}"
        return f"Build failed with exit code {self.returncode}: {self.command}"


class RunSummary:
    """Aggregate results of a corpus pass.

    Worker threads never touch this directly; the coordinator appends each
    finished result under a single lock.
    """

    def __init__(self, root: Path, dry_run: bool = False):
        self.root = Path(root).resolve()
        self.dry_run = dry_run
        self.results: List[ProcessingResult] = []
        self.build: Optional[BuildResult] = None
        self.cancelled = False
        self._lock = threading.Lock()

    def add(self, result: ProcessingResult) -> None:
        """Record a finished file result."""
        with self._lock:
            self.results.append(result)

    def sorted_results(self) -> List[ProcessingResult]:
        with self._lock:
            return sorted(self.results, key=lambda result: str(result.path))

    def by_status(self, status: ProcessingStatus) -> List[ProcessingResult]:
        return [result for result in self.sorted_results() if result.status == status]

    @property
    def changed(self) -> List[ProcessingResult]:
        return self.by_status(ProcessingStatus.CHANGED)

    @property
    def would_change(self) -> List[ProcessingResult]:
        return self.by_status(ProcessingStatus.WOULD_CHANGE)

    @property
    def failures(self) -> List[ProcessingResult]:
        return self.by_status(ProcessingStatus.FAILED)

    @property
    def backups(self) -> List[Path]:
        return [result.backup_path for result in self.changed if result.backup_path]

    @property
    def warnings(self) -> List[str]:
        messages = []
        for result in self.sorted_results():
            messages.extend(f"{self.relative(result.path)}: {warning}" for warning in result.warnings)
        return messages

    @property
    def total_regions(self) -> int:
        return sum(len(result.changed_regions) for result in self.changed + self.would_change)

    @property
    def has_file_errors(self) -> bool:
        return bool(self.failures)

    @property
    def build_failed(self) -> bool:
        return self.build is not None and not self.build.passed

    def exit_code(self) -> int:
        """0 clean, 1 per-file errors, 2 build validation failed."""
        if self.build_failed:
            return 2
        if self.has_file_errors:
            return 1
        return 0

    def relative(self, path: Path) -> str:
        try:
            return Path(path).relative_to(self.root).as_posix()
        except ValueError:
            return str(path)

"""Per-file escaping pipeline and the corpus-wide worker pool."""

import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

import frontmatter
import yaml

from ..config import EscapeConfig
from ..errors import EscapeFixError, FileProcessingError, UnterminatedFenceError
from ..output.models import ProcessingResult, ProcessingStatus, RunSummary
from ..scanning.fences import scan_regions
from ..scanning.models import SourceFile
from ..scanning.walker import FileWalker
from .backup import BackupManager
from .conflict_detector import ConflictDetector
from .entities import repair_marker_artifacts, revert_entities
from .injector import EscapeInjector


ResultCallback = Callable[[ProcessingResult], None]


class CorpusProcessor:
    """Runs the scan, detect, inject and write steps over a set of files.

    Each file is handled by exactly one worker, which owns its
    :class:`SourceFile`, region list and :class:`BackupManager`. Workers
    share only read-only configuration; results travel back to the
    coordinating thread through futures.
    """

    def __init__(self, config: EscapeConfig, cancel_event: Optional[threading.Event] = None,
                 on_result: Optional[ResultCallback] = None):
        """Initialize the processor.

        Args:
            config: Run configuration.
            cancel_event: Set to stop the run before the next file starts.
            on_result: Called in the coordinating thread for every finished file.
        """
        self.config = config
        self.cancel_event = cancel_event or threading.Event()
        self.on_result = on_result
        self.detector = ConflictDetector(
            config.begin_marker, config.end_marker, config.compiled_ignore_patterns()
        )
        self.injector = EscapeInjector(self.detector)

    def cancel(self) -> None:
        """Request cancellation; files already being written finish first."""
        self.cancel_event.set()

    def discover(self, root) -> List[Path]:
        walker = FileWalker(
            root,
            extensions=self.config.extensions,
            exclude_dirs=self.config.exclude_dirs,
            exclude_files=self.config.exclude_files,
        )
        return walker.walk()

    def run(self, root) -> RunSummary:
        """Process every candidate file under ``root``."""
        summary = RunSummary(root, dry_run=self.config.dry_run)
        self.process_files(self.discover(root), summary)
        return summary

    def process_files(self, files: Iterable[Path], summary: RunSummary) -> RunSummary:
        """Process ``files`` and append their results to ``summary``.

        Raises:
            KeyboardInterrupt: Re-raised after in-flight files have finished
                and their results have been recorded.
        """
        # Even with one worker the files run off the main thread, so an
        # interrupt there never lands in the middle of a write
        pool = ThreadPoolExecutor(max_workers=self.config.workers, thread_name_prefix="escape-fix")
        futures: Dict[Future, Path] = {}
        collected = set()
        try:
            for path in files:
                futures[pool.submit(self._process_unless_cancelled, path)] = path
            for future in as_completed(futures):
                collected.add(future)
                self._collect(future, futures[future], summary)
        except KeyboardInterrupt:
            self.cancel()
            for future in futures:
                future.cancel()
            pool.shutdown(wait=True)
            for future, path in futures.items():
                if future not in collected and future.done() and not future.cancelled():
                    self._collect(future, path, summary)
            summary.cancelled = True
            raise
        finally:
            pool.shutdown(wait=True)

        if self.cancel_event.is_set():
            summary.cancelled = True
        return summary

    def _process_unless_cancelled(self, path: Path) -> Optional[ProcessingResult]:
        # Checked at the top of every per-file task
        if self.cancel_event.is_set():
            return None
        return self.process_file(path)

    def _collect(self, future: Future, path: Path, summary: RunSummary) -> None:
        try:
            result = future.result()
        except Exception as e:
            result = ProcessingResult(path, ProcessingStatus.FAILED, error=e)
        if result is None:
            summary.cancelled = True
            return
        summary.add(result)
        self._notify(result)

    def _notify(self, result: ProcessingResult) -> None:
        if self.on_result is not None:
            self.on_result(result)

    def process_file(self, path) -> ProcessingResult:
        """Run the full pipeline for one file.

        Per-file errors are captured in the returned result, never raised,
        so one bad file cannot stop the rest of the corpus.
        """
        path = Path(path)
        try:
            text = read_text(path)
        except FileProcessingError as e:
            return ProcessingResult(path, ProcessingStatus.FAILED, error=e)

        if liquid_disabled(text):
            return ProcessingResult(
                path, ProcessingStatus.SKIPPED, warnings=["front matter disables Liquid, skipped"]
            )

        source = SourceFile.from_text(path, text)
        try:
            source.regions = scan_regions(source.lines)
        except UnterminatedFenceError as e:
            return ProcessingResult(path, ProcessingStatus.FAILED, error=e.with_path(path))

        entity_repairs = 0
        if self.config.revert_entities:
            source.lines, fixed_markers = repair_marker_artifacts(
                source.lines, self.config.begin_marker, self.config.end_marker
            )
            source.lines, repaired = revert_entities(source.lines, source.regions)
            entity_repairs = len(set(fixed_markers) | set(repaired))

        self.detector.classify_all(source.lines, source.regions)
        report = self.detector.analyze_markers(source.lines, source.regions)
        injection = self.injector.inject(source.lines, source.regions, newline=source.newline, report=report)

        new_text = "".join(injection.lines)
        result = ProcessingResult(
            path,
            ProcessingStatus.UNCHANGED,
            changed_regions=injection.changed_regions,
            warnings=report.warnings() + self.detector.unwrappable_warnings(source.regions),
            entity_repairs=entity_repairs,
        )
        if new_text == text:
            return result

        if self.config.dry_run:
            result.status = ProcessingStatus.WOULD_CHANGE
            return result

        try:
            with BackupManager(path, suffix=self.config.backup_suffix) as backup:
                backup.write(new_text)
                result.backup_path = backup.commit()
                result.replaced_backup = backup.replaced_previous
        except EscapeFixError as e:
            result.status = ProcessingStatus.FAILED
            result.error = e
            return result

        result.status = ProcessingStatus.CHANGED
        return result


def read_text(path: Path) -> str:
    """Read a file as UTF-8 without newline translation.

    Raises:
        FileProcessingError: If the file cannot be read or decoded.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise FileProcessingError(path, f"read failed: {e}")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FileProcessingError(path, f"not valid UTF-8 (byte {e.start})")


def liquid_disabled(text: str) -> bool:
    """True if the page's front matter sets ``render_with_liquid: false``."""
    if not text.startswith("---"):
        return False
    try:
        post = frontmatter.loads(text)
    except (yaml.YAMLError, ValueError, TypeError):
        # Unparsable front matter; the file is processed like any other
        return False
    return post.metadata.get("render_with_liquid") is False

"""CLI output formatters for escape-fix runs."""

from typing import List

from rich.text import Text

from ..utils.console import (
    _create_files_table,
    _rich_blank_line,
    _get_console,
    _rich_echo,
    _rich_error,
    _rich_info,
    _rich_panel,
    _rich_success,
    _rich_warning,
)
from ..utils.helpers import pluralize
from .models import ProcessingResult, ProcessingStatus, RunSummary


STATUS_STYLES = {
    ProcessingStatus.CHANGED: "green",
    ProcessingStatus.WOULD_CHANGE: "yellow",
    ProcessingStatus.UNCHANGED: "dim white",
    ProcessingStatus.SKIPPED: "cyan",
    ProcessingStatus.FAILED: "bold red",
}


class SummaryFormatter:
    """Renders per-file progress and the end-of-run summary."""

    def __init__(self, verbose: bool = False):
        """Initialize formatter.

        Args:
            verbose: Also list unchanged files and per-file progress.
        """
        self.verbose = verbose

    def format_progress(self, summary: RunSummary, result: ProcessingResult) -> str:
        """One line describing a finished file."""
        path = summary.relative(result.path)
        if result.failed:
            return f"✗ {_failure_text(summary, result)}"
        if result.changed_regions:
            ranges = ", ".join(result.line_ranges)
            verb = "would escape" if result.status == ProcessingStatus.WOULD_CHANGE else "escaped"
            return f"• {path}: {verb} lines {ranges}"
        return f"• {path}: {result.status.value}"

    def print_progress(self, summary: RunSummary, result: ProcessingResult) -> None:
        """Print a progress line in verbose mode; failures are listed in the summary."""
        if not self.verbose:
            return
        if result.failed:
            _rich_error(self.format_progress(summary, result))
        else:
            _rich_echo(self.format_progress(summary, result), style="muted")

    def print_summary(self, summary: RunSummary) -> None:
        """Print the results table, totals, errors, warnings and backups."""
        rows = [result for result in summary.sorted_results()
                if self.verbose or result.status != ProcessingStatus.UNCHANGED]
        if rows:
            title = "Dry run" if summary.dry_run else "Escaped files"
            table = _create_files_table(title)
            for result in rows:
                table.add_row(
                    Text(summary.relative(result.path)),
                    Text(result.status.value, style=STATUS_STYLES[result.status]),
                    Text(", ".join(result.line_ranges) or "-"),
                    Text(summary.relative(result.backup_path) if result.backup_path else "-"),
                )
            _get_console().print(table)
            _rich_blank_line()

        headline, details = self.format_totals(summary)
        if summary.dry_run:
            _rich_info(headline, symbol="preview")
        elif summary.changed:
            _rich_success(headline, symbol="success")
        else:
            _rich_info(headline, symbol="check")
        _rich_echo(details, style="muted")

        for result in summary.failures:
            _rich_error(_failure_text(summary, result), symbol="error")

        for warning in summary.warnings:
            _rich_warning(warning, symbol="warning")

        backups = summary.backups
        if backups:
            replaced = sum(1 for result in summary.changed if result.replaced_backup)
            note = f" ({replaced} replaced a backup from an earlier run)" if replaced else ""
            _rich_info(
                f"{pluralize(len(backups), 'backup')} kept beside the originals{note}; "
                "remove them once the build is verified",
                symbol="backup",
            )

        if summary.cancelled:
            _rich_warning("Run cancelled before all files were processed", symbol="warning")

    def format_totals(self, summary: RunSummary) -> List[str]:
        counts = {status: len(summary.by_status(status)) for status in ProcessingStatus}
        scanned = sum(counts.values())
        if summary.dry_run:
            headline = (f"[DRY RUN] {pluralize(counts[ProcessingStatus.WOULD_CHANGE], 'file')} would change, "
                        f"{pluralize(summary.total_regions, 'code block')} to escape")
        else:
            headline = (f"{pluralize(counts[ProcessingStatus.CHANGED], 'file')} changed, "
                        f"{pluralize(summary.total_regions, 'code block')} escaped")
        details = (f"{pluralize(scanned, 'file')} scanned: "
                   f"{counts[ProcessingStatus.UNCHANGED]} unchanged, "
                   f"{counts[ProcessingStatus.SKIPPED]} skipped, "
                   f"{counts[ProcessingStatus.FAILED]} failed")
        return [headline, details]

    def print_build(self, summary: RunSummary) -> None:
        build = summary.build
        if build is None:
            return
        if build.passed:
            _rich_success(build.describe(), symbol="check")
            return

        _rich_blank_line()
        _rich_error(build.describe(), symbol="error")
        details = build.error_lines() or build.output.strip().splitlines()[-10:]
        if details:
            _rich_panel("\n".join(details), title="Build errors", style="red", stderr=True)
        _rich_warning("Written files were kept; fix the remaining errors and re-run", symbol="info")


def _failure_text(summary: RunSummary, result: ProcessingResult) -> str:
    # Errors already carrying the absolute path are shown with the relative one
    message = str(result.error)
    absolute = str(result.path)
    if message.startswith(absolute):
        return summary.relative(result.path) + message[len(absolute):]
    return f"{summary.relative(result.path)}: {message}"

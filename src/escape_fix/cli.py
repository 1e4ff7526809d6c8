"""Command-line interface for escape-fix."""

import sys
from pathlib import Path

import click

from escape_fix.config import EscapeConfig
from escape_fix.core.build_validator import BuildValidator
from escape_fix.core.processor import CorpusProcessor
from escape_fix.errors import ConfigError
from escape_fix.output.formatters import SummaryFormatter
from escape_fix.output.models import RunSummary
from escape_fix.utils.console import _get_console, _rich_error, _rich_info, _rich_warning
from escape_fix.utils.helpers import pluralize
from escape_fix.version import get_version


def print_version(ctx, param, value):
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return

    from rich.panel import Panel
    from rich.text import Text

    version_text = Text()
    version_text.append("escape-fix", style="bold cyan")
    version_text.append(f" version {get_version()}", style="white")
    _get_console().print(Panel(version_text, border_style="cyan", padding=(0, 1)))
    ctx.exit()


@click.command(help="Wrap fenced code blocks that contain template syntax in raw markers")
@click.argument('root_dir', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option('--dry-run', is_flag=True, help="Report what would change without writing")
@click.option('--validate-build', is_flag=True, help="Run the site build after the pass")
@click.option('--build-command', default=None, help="Build command (default: bundle exec jekyll build)")
@click.option('--build-timeout', type=float, default=None, help="Seconds before the build is treated as failed")
@click.option('--workers', '-j', type=int, default=None, help="Number of files processed in parallel")
@click.option('--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Config file (default: ROOT_DIR/.escape-fix.yml)")
@click.option('--revert-entities', is_flag=True,
              help="Repair &#123;&#123; style entity escapes in code and mangled {{% raw %} markers")
@click.option('--verbose', '-v', is_flag=True, help="Show every file as it is processed")
@click.option('--version', is_flag=True, callback=print_version,
              expose_value=False, is_eager=True, help="Show version and exit.")
def cli(root_dir, dry_run, validate_build, build_command, build_timeout, workers, config_path,
        revert_entities, verbose):
    """Escape template-conflicting code blocks under ROOT_DIR.

    Exit codes: 0 success, 1 files with unterminated fences or I/O errors,
    2 build validation failed.
    """
    root = root_dir.resolve()
    try:
        config = EscapeConfig.load(
            root,
            config_path=config_path,
            dry_run=dry_run,
            build_command=build_command,
            build_timeout=build_timeout,
            workers=workers,
            revert_entities=revert_entities or None,
        )
    except ConfigError as e:
        _rich_error(f"Configuration error: {e}", symbol="error")
        sys.exit(1)

    formatter = SummaryFormatter(verbose=verbose)
    summary = RunSummary(root, dry_run=config.dry_run)
    processor = CorpusProcessor(config, on_result=lambda result: formatter.print_progress(summary, result))

    files = processor.discover(root)
    if not files:
        _rich_warning(f"No {'/'.join(config.extensions)} files found under {root}", symbol="warning")
    else:
        mode = " (dry run)" if config.dry_run else ""
        _rich_info(f"Scanning {pluralize(len(files), 'file')} under {root}{mode}", symbol="running")

    try:
        processor.process_files(files, summary)
    except KeyboardInterrupt:
        formatter.print_summary(summary)
        raise click.Abort()

    formatter.print_summary(summary)

    if validate_build:
        if config.dry_run:
            _rich_warning("Skipping build validation in dry-run mode", symbol="warning")
        else:
            _rich_info(f"Running build: {config.build_command}", symbol="build")
            validator = BuildValidator(config.build_command, root, timeout=config.build_timeout)
            summary.build = validator.validate()
            formatter.print_build(summary)

    sys.exit(summary.exit_code())


def main():
    """Console script entry point."""
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()

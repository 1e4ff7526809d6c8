"""Console utility functions for formatting and output."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme


# Status symbols for consistent iconography
STATUS_SYMBOLS = {
    'success': '✨',
    'running': '🚀',
    'info': '💡',
    'warning': '⚠️',
    'error': '❌',
    'check': '✅',
    'list': '📋',
    'preview': '👀',
    'backup': '💾',
    'build': '🧪',
}

CUSTOM_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
    "highlight": "bold magenta",
    "muted": "dim white",
    "accent": "bold blue",
    "title": "bold cyan"
})

# Lazy loading of Rich consoles to keep import time low
_console: Optional[Console] = None
_err_console: Optional[Console] = None


def _get_console(stderr: bool = False) -> Console:
    """Get Rich console instance with lazy loading.

    No file is bound, so the console resolves ``sys.stdout``/``sys.stderr`` at
    write time and follows stream swaps such as click's test runner.
    """
    global _console, _err_console
    if stderr:
        if _err_console is None:
            _err_console = Console(theme=CUSTOM_THEME, stderr=True, soft_wrap=True)
        return _err_console
    if _console is None:
        _console = Console(theme=CUSTOM_THEME, soft_wrap=True)
    return _console


def _rich_echo(message: str, color: str = "white", style: str = None, bold: bool = False,
               symbol: str = None, stderr: bool = False):
    """Echo message with Rich formatting."""
    # Handle backward compatibility - if style is provided, use it as color
    if style is not None:
        color = style

    if symbol and symbol in STATUS_SYMBOLS:
        message = f"{STATUS_SYMBOLS[symbol]} {message}"

    style_str = f"bold {color}" if bold else color
    # Paths and code samples contain square brackets; never treat them as markup
    _get_console(stderr=stderr).print(message, style=style_str, markup=False, highlight=False)


def _rich_success(message: str, symbol: str = None):
    """Display success message with green color and bold styling."""
    _rich_echo(message, color="green", symbol=symbol, bold=True)


def _rich_error(message: str, symbol: str = None):
    """Display error message with red color on stderr."""
    _rich_echo(message, color="red", symbol=symbol, stderr=True)


def _rich_warning(message: str, symbol: str = None):
    """Display warning message with yellow color."""
    _rich_echo(message, color="yellow", symbol=symbol)


def _rich_info(message: str, symbol: str = None):
    """Display info message with blue color."""
    _rich_echo(message, color="blue", symbol=symbol)


def _rich_panel(content: str, title: str = None, style: str = "cyan", stderr: bool = False):
    """Display content in a Rich panel."""
    panel = Panel(Text(content), title=title, border_style=style)
    _get_console(stderr=stderr).print(panel)


def _rich_blank_line():
    """Print a blank line."""
    _get_console().print()


def _create_files_table(title: str = "Files") -> Table:
    """Create a Rich table for per-file results."""
    table = Table(title=f"{STATUS_SYMBOLS['list']} {title}", show_header=True, header_style="bold cyan")
    table.add_column("File", style="bold white")
    table.add_column("Status", style="white")
    table.add_column("Regions", style="white")
    table.add_column("Backup", style="dim white")
    return table

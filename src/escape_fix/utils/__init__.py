"""Utility modules for escape-fix."""

from .console import (
    _rich_success,
    _rich_error,
    _rich_warning,
    _rich_info,
    _rich_echo,
    _rich_panel,
    _rich_blank_line,
    _create_files_table,
    _get_console,
    STATUS_SYMBOLS
)
from .helpers import is_tool_available, command_executable, pluralize

__all__ = [
    '_rich_success',
    '_rich_error',
    '_rich_warning',
    '_rich_info',
    '_rich_echo',
    '_rich_panel',
    '_rich_blank_line',
    '_create_files_table',
    '_get_console',
    'STATUS_SYMBOLS',
    'is_tool_available',
    'command_executable',
    'pluralize'
]

"""escape-fix: wrap template-conflicting fenced code blocks in raw markers."""

from .version import __version__, get_version
from .config import EscapeConfig
from .errors import (
    EscapeFixError,
    ConfigError,
    UnterminatedFenceError,
    FileProcessingError,
    BuildValidationFailure
)

__all__ = [
    '__version__',
    'get_version',
    'EscapeConfig',
    'EscapeFixError',
    'ConfigError',
    'UnterminatedFenceError',
    'FileProcessingError',
    'BuildValidationFailure'
]

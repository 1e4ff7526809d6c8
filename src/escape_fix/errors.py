"""Exception types raised while escaping template conflicts."""

from pathlib import Path
from typing import Optional, Union


class EscapeFixError(Exception):
    """Base class for all escape-fix errors."""


class ConfigError(EscapeFixError):
    """Raised when the configuration file or CLI overrides are invalid."""


class UnterminatedFenceError(EscapeFixError):
    """A fenced code block is still open at end of file.

    The file is skipped entirely; nothing is written.
    """

    def __init__(self, line: int, delimiter: str, path: Optional[Union[str, Path]] = None):
        self.line = line  # 1-based line of the opening fence
        self.delimiter = delimiter
        self.path = Path(path) if path is not None else None
        super().__init__(self._format())

    def with_path(self, path: Union[str, Path]) -> "UnterminatedFenceError":
        """Return a copy of this error bound to ``path``."""
        return UnterminatedFenceError(self.line, self.delimiter, path)

    def _format(self) -> str:
        location = f"{self.path}:{self.line}" if self.path else f"line {self.line}"
        return f"{location}: unterminated code fence '{self.delimiter}' (no closing fence before end of file)"


class FileProcessingError(EscapeFixError):
    """Reading, decoding or writing a single file failed."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class BuildValidationFailure(EscapeFixError):
    """The downstream build still fails after a full pass."""

    def __init__(self, result):
        self.result = result
        super().__init__(result.describe())

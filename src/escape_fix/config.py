"""Configuration management for escape-fix."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Pattern

import yaml

from .errors import ConfigError
from .scanning.walker import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXTENSIONS


CONFIG_FILENAME = ".escape-fix.yml"

DEFAULT_BEGIN_MARKER = "{% raw %}"
DEFAULT_END_MARKER = "{% endraw %}"
DEFAULT_BUILD_COMMAND = "bundle exec jekyll build"
DEFAULT_BUILD_TIMEOUT = 600.0


@dataclass
class EscapeConfig:
    """Configuration for one escape-fix run."""
    begin_marker: str = DEFAULT_BEGIN_MARKER
    end_marker: str = DEFAULT_END_MARKER
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
    exclude_files: List[str] = field(default_factory=list)
    ignore_patterns: List[str] = field(default_factory=list)  # reviewed false positives
    backup_suffix: str = ".backup"
    workers: int = 4
    build_command: str = DEFAULT_BUILD_COMMAND
    build_timeout: float = DEFAULT_BUILD_TIMEOUT
    revert_entities: bool = False
    dry_run: bool = False

    def __post_init__(self):
        """Validate values that would otherwise fail deep inside a run."""
        self.begin_marker = self.begin_marker.strip()
        self.end_marker = self.end_marker.strip()
        if not self.begin_marker or not self.end_marker:
            raise ConfigError("Escape markers must not be empty")
        if self.begin_marker == self.end_marker:
            raise ConfigError("Begin and end markers must differ")
        if self.workers < 1:
            raise ConfigError(f"workers must be at least 1, got {self.workers}")
        if self.build_timeout <= 0:
            raise ConfigError(f"build timeout must be positive, got {self.build_timeout}")
        if not self.backup_suffix:
            raise ConfigError("backup_suffix must not be empty")
        self.extensions = [ext if ext.startswith(".") else f".{ext}" for ext in self.extensions]
        self.compiled_ignore_patterns()

    def compiled_ignore_patterns(self) -> List[Pattern]:
        """Compile ``ignore_patterns``, reporting the first invalid one."""
        compiled = []
        for pattern in self.ignore_patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                raise ConfigError(f"Invalid ignore pattern {pattern!r}: {e}")
        return compiled

    @classmethod
    def load(cls, root, config_path: Optional[Path] = None, **overrides) -> 'EscapeConfig':
        """Create configuration from the config file with command-line overrides.

        Args:
            root: Corpus root; ``.escape-fix.yml`` is looked up there when
                ``config_path`` is not given.
            config_path: Explicit configuration file (must exist).
            **overrides: Command-line values; ``None`` means "not given".

        Returns:
            EscapeConfig: Configuration with file values and overrides applied.

        Raises:
            ConfigError: If the file is unreadable or holds invalid values.
        """
        if config_path is not None:
            path = Path(config_path)
            if not path.is_file():
                raise ConfigError(f"Config file not found: {path}")
        else:
            path = Path(root) / CONFIG_FILENAME

        values = cls._read_file(path) if path.is_file() else {}
        values.update({key: value for key, value in overrides.items() if value is not None})

        try:
            return cls(**values)
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}")

    @staticmethod
    def _read_file(path: Path) -> dict:
        """Flatten the YAML document into constructor keyword arguments."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML format in {path}: {e}")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"{path.name} must contain a YAML object, got {type(data).__name__}")

        values = {}
        markers = data.get('markers', {})
        if not isinstance(markers, dict):
            raise ConfigError("'markers' must be a mapping with 'begin' and 'end'")
        if 'begin' in markers:
            values['begin_marker'] = str(markers['begin'])
        if 'end' in markers:
            values['end_marker'] = str(markers['end'])

        for key in ('extensions', 'exclude_dirs', 'exclude_files', 'ignore_patterns'):
            if key in data:
                if not isinstance(data[key], list):
                    raise ConfigError(f"'{key}' must be a list")
                values[key] = [str(item) for item in data[key]]

        if 'backup_suffix' in data:
            values['backup_suffix'] = str(data['backup_suffix'])
        if 'workers' in data:
            values['workers'] = _as_number(data['workers'], 'workers', int)
        if 'revert_entities' in data:
            values['revert_entities'] = bool(data['revert_entities'])

        build = data.get('build', {})
        if not isinstance(build, dict):
            raise ConfigError("'build' must be a mapping")
        if 'command' in build:
            values['build_command'] = str(build['command'])
        if 'timeout' in build:
            values['build_timeout'] = _as_number(build['timeout'], 'build.timeout', float)

        return values


def _as_number(value, name, kind):
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigError(f"'{name}' must be a number, got {value!r}")

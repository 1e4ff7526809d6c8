"""Core escaping pipeline for escape-fix."""

from .conflict_detector import ConflictDetector, MarkerReport
from .injector import EscapeInjector, Injection, InjectionResult
from .backup import BackupManager
from .build_validator import BuildValidator
from .entities import (
    marker_artifact_repairs,
    repair_marker_artifacts,
    revert_entities,
    revert_entities_in_line,
)
from .processor import CorpusProcessor, read_text, liquid_disabled

__all__ = [
    'ConflictDetector',
    'MarkerReport',
    'EscapeInjector',
    'Injection',
    'InjectionResult',
    'BackupManager',
    'BuildValidator',
    'revert_entities',
    'revert_entities_in_line',
    'marker_artifact_repairs',
    'repair_marker_artifacts',
    'CorpusProcessor',
    'read_text',
    'liquid_disabled'
]

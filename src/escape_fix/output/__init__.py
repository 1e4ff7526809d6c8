"""Output package for escape-fix - result models and formatters."""

from .models import BuildResult, ProcessingResult, ProcessingStatus, RunSummary
from .formatters import SummaryFormatter

__all__ = [
    'BuildResult',
    'ProcessingResult',
    'ProcessingStatus',
    'RunSummary',
    'SummaryFormatter'
]

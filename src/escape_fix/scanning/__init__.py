"""Scanning package for escape-fix - file discovery and fenced code regions."""

from .models import CodeRegion, MarkerSpan, SourceFile, split_lines, strip_terminator
from .fences import FenceScanner, scan_regions, match_open_fence, closes_fence
from .walker import FileWalker, find_candidate_files, DEFAULT_EXTENSIONS, DEFAULT_EXCLUDE_DIRS

__all__ = [
    'CodeRegion',
    'MarkerSpan',
    'SourceFile',
    'split_lines',
    'strip_terminator',
    'FenceScanner',
    'scan_regions',
    'match_open_fence',
    'closes_fence',
    'FileWalker',
    'find_candidate_files',
    'DEFAULT_EXTENSIONS',
    'DEFAULT_EXCLUDE_DIRS'
]

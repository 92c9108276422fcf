"""
Core scanning components.

- characters: registry of the nine bidirectional control characters
- scanner: line/column scan of a text body
- patterns: glob compilation and enumeration
- selector: include/exclude file selection
- orchestrator: per-file read, scan, report and aggregation
"""

from .characters import (
    BIDI_CHARACTERS,
    CONTROL_CHARACTERS,
    ControlCharacter,
    by_abbreviation,
    classify,
)
from .orchestrator import FileReport, RunSummary, ScanOrchestrator, read_text, run_scan
from .patterns import GlobPattern, compile_pattern
from .scanner import Occurrence, ScanResult, scan_text
from .selector import FileSelector, SelectionEntry, SelectionPolicy, select

__all__ = [
    "BIDI_CHARACTERS",
    "CONTROL_CHARACTERS",
    "ControlCharacter",
    "FileReport",
    "FileSelector",
    "GlobPattern",
    "Occurrence",
    "RunSummary",
    "ScanOrchestrator",
    "ScanResult",
    "SelectionEntry",
    "SelectionPolicy",
    "by_abbreviation",
    "classify",
    "compile_pattern",
    "read_text",
    "run_scan",
    "scan_text",
    "select",
]

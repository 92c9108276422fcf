"""
bidi-detector: find Unicode bidirectional control characters in source trees.

These characters reorder how code is displayed without changing how it is
parsed ("Trojan Source", CVE-2021-42574). The scanner reports the exact
line and character column of each one and exits non-zero when any are found,
which makes it suitable as a CI gate.

Quick Start:
-----------
>>> from bidi_detector import scan_text
>>> result = scan_text("x = 1\\u202e// comment")
>>> [(o.line, o.column) for o in result.occurrences]
[(1, 6)]
"""

from .config import ConfigLoader, ScanConfig, get_default_config
from .core import (
    CONTROL_CHARACTERS,
    ControlCharacter,
    FileReport,
    FileSelector,
    Occurrence,
    RunSummary,
    ScanOrchestrator,
    ScanResult,
    SelectionPolicy,
    classify,
    run_scan,
    scan_text,
)
from .utils.errors import ConfigurationError, FileReadError, PatternError, ReadErrorKind

__version__ = "0.3.0"

__all__ = [
    "CONTROL_CHARACTERS",
    "ConfigLoader",
    "ConfigurationError",
    "ControlCharacter",
    "FileReadError",
    "FileReport",
    "FileSelector",
    "Occurrence",
    "PatternError",
    "ReadErrorKind",
    "RunSummary",
    "ScanConfig",
    "ScanOrchestrator",
    "ScanResult",
    "SelectionPolicy",
    "__version__",
    "classify",
    "get_default_config",
    "run_scan",
    "scan_text",
]

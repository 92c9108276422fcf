"""
Utility modules for bidi-detector.

- Structured error codes and exception types
"""

from .errors import (
    BidiDetectorError,
    ConfigurationError,
    ErrorCode,
    ErrorDetails,
    FileReadError,
    PatternError,
    ReadErrorKind,
    SelectionError,
)

__all__ = [
    "BidiDetectorError",
    "ConfigurationError",
    "ErrorCode",
    "ErrorDetails",
    "FileReadError",
    "PatternError",
    "ReadErrorKind",
    "SelectionError",
]

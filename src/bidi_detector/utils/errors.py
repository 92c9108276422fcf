"""Structured error codes and error handling for bidi-detector.

Error codes follow the pattern: E{category}{number}
- E1xx: File read errors (per file, never fatal to a run)
- E2xx: File selection errors (enumeration and glob patterns)
- E8xx: Configuration errors

Per-file read failures are classified by :class:`ReadErrorKind` so that the
``ignore_invalid_data`` display setting can match on undecodable content
specifically, while permission or I/O failures are always reported.

Example:
    >>> from bidi_detector.utils.errors import ErrorCode, PatternError
    >>> raise PatternError("[abc", "unclosed character class")
"""

from __future__ import annotations

import errno
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """Standardized error codes, grouped by category."""

    # E1xx: File read errors
    E100_READ_ERROR = "E100"
    E101_INVALID_DATA = "E101"
    E102_FILE_NOT_FOUND = "E102"
    E103_PERMISSION_DENIED = "E103"
    E104_IS_DIRECTORY = "E104"

    # E2xx: Selection errors
    E200_SELECTION_ERROR = "E200"
    E201_INVALID_PATTERN = "E201"
    E202_UNREADABLE_DIRECTORY = "E202"
    E203_BROKEN_SYMLINK = "E203"

    # E8xx: Configuration errors
    E800_CONFIG_ERROR = "E800"
    E801_INVALID_CONFIG_FILE = "E801"
    E802_CONFIG_VALIDATION_FAILED = "E802"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.E100_READ_ERROR: "Could not read file",
    ErrorCode.E101_INVALID_DATA: "stream did not contain valid UTF-8",
    ErrorCode.E102_FILE_NOT_FOUND: "No such file or directory",
    ErrorCode.E103_PERMISSION_DENIED: "Permission denied",
    ErrorCode.E104_IS_DIRECTORY: "Is a directory",
    ErrorCode.E200_SELECTION_ERROR: "File selection error",
    ErrorCode.E201_INVALID_PATTERN: "Invalid glob pattern",
    ErrorCode.E202_UNREADABLE_DIRECTORY: "Could not list directory",
    ErrorCode.E203_BROKEN_SYMLINK: "Broken symbolic link",
    ErrorCode.E800_CONFIG_ERROR: "Configuration error",
    ErrorCode.E801_INVALID_CONFIG_FILE: "Invalid config file content",
    ErrorCode.E802_CONFIG_VALIDATION_FAILED: "Configuration validation failed",
}


class ReadErrorKind(Enum):
    """Why a selected file could not be turned into text."""

    INVALID_DATA = "invalid_data"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    IS_DIRECTORY = "is_directory"
    IO_ERROR = "io_error"

    @property
    def code(self) -> ErrorCode:
        return _READ_KIND_CODES[self]


_READ_KIND_CODES: dict[ReadErrorKind, ErrorCode] = {
    ReadErrorKind.INVALID_DATA: ErrorCode.E101_INVALID_DATA,
    ReadErrorKind.NOT_FOUND: ErrorCode.E102_FILE_NOT_FOUND,
    ReadErrorKind.PERMISSION_DENIED: ErrorCode.E103_PERMISSION_DENIED,
    ReadErrorKind.IS_DIRECTORY: ErrorCode.E104_IS_DIRECTORY,
    ReadErrorKind.IO_ERROR: ErrorCode.E100_READ_ERROR,
}


@dataclass
class ErrorDetails:
    """Structured error details for logging.

    Attributes:
        code: Error code enum value
        message: Human-readable error message
        details: Additional error details
        fatal: Whether the error aborts the whole run
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    fatal: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "error_code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        result["fatal"] = self.fatal
        return result

    def to_log_dict(self) -> dict[str, Any]:
        """Flattened form suitable for ``extra=`` in logging calls."""
        log_dict: dict[str, Any] = {
            "error_code": self.code.value,
            "error_message": self.message,
            "fatal": self.fatal,
        }
        for key, value in self.details.items():
            log_dict[f"detail_{key}"] = value
        return log_dict


class BidiDetectorError(Exception):
    """Base exception for bidi-detector errors with structured error codes."""

    fatal = False

    def __init__(
        self,
        code: ErrorCode,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message or ERROR_MESSAGES.get(code, "Unknown error")
        self.error_details = ErrorDetails(
            code=code,
            message=self.message,
            details=details or {},
            fatal=self.fatal,
        )
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def log(self, level: int = logging.ERROR) -> None:
        """Log the error with structured details."""
        logger.log(level, str(self), extra=self.error_details.to_log_dict())


class ConfigurationError(BidiDetectorError):
    """Malformed configuration content. Fatal to the run."""

    fatal = True

    def __init__(
        self,
        code: ErrorCode = ErrorCode.E800_CONFIG_ERROR,
        message: str | None = None,
        path: str | None = None,
        **kwargs: Any,
    ) -> None:
        details: dict[str, Any] = kwargs.pop("details", {})
        if path is not None:
            details["path"] = path
        super().__init__(code, message, details=details, **kwargs)


class PatternError(ConfigurationError):
    """An include or exclude glob could not be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(
            ErrorCode.E201_INVALID_PATTERN,
            f"Invalid glob pattern {pattern!r}: {reason}",
            details={"pattern": pattern, "reason": reason},
        )


class SelectionError(BidiDetectorError):
    """A candidate path could not be resolved during enumeration."""

    def __init__(
        self,
        path: str,
        code: ErrorCode = ErrorCode.E200_SELECTION_ERROR,
        reason: str | None = None,
    ) -> None:
        self.path = path
        self.reason = reason or ERROR_MESSAGES[code]
        super().__init__(code, f"{path}: {self.reason}", details={"path": path})


class FileReadError(BidiDetectorError):
    """A selected file could not be read as UTF-8 text."""

    def __init__(self, path: str, kind: ReadErrorKind, reason: str | None = None) -> None:
        self.path = path
        self.kind = kind
        self.reason = reason or ERROR_MESSAGES[kind.code]
        super().__init__(
            kind.code,
            f"Could not read file {path} - {self.reason}",
            details={"path": path, "kind": kind.value},
        )

    @property
    def is_invalid_data(self) -> bool:
        return self.kind is ReadErrorKind.INVALID_DATA

    @classmethod
    def from_exception(cls, path: str, exc: BaseException) -> FileReadError:
        """Classify a decode or OS error raised while reading ``path``."""
        if isinstance(exc, UnicodeDecodeError):
            return cls(path, ReadErrorKind.INVALID_DATA)
        if isinstance(exc, FileNotFoundError):
            kind = ReadErrorKind.NOT_FOUND
        elif isinstance(exc, PermissionError):
            kind = ReadErrorKind.PERMISSION_DENIED
        elif isinstance(exc, IsADirectoryError):
            kind = ReadErrorKind.IS_DIRECTORY
        elif isinstance(exc, OSError) and exc.errno == errno.EILSEQ:
            kind = ReadErrorKind.INVALID_DATA
        else:
            kind = ReadErrorKind.IO_ERROR
        reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
        return cls(path, kind, reason)


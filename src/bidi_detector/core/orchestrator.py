"""Scan orchestration: select files, read, scan, report and aggregate.

Output contract:

- stdout: ``<path> - <count> BIDI characters`` per scanned file (only files
  with occurrences unless ``display.verbose`` is set)
- stderr: ``Found character <ABBREV> (<Name>), <path>:<line>:<column>`` per
  occurrence when ``display.show_details`` is set, plus per-file and
  enumeration errors

No single file can abort a run. Only a malformed include or exclude pattern
is fatal, and it is raised by :meth:`ScanOrchestrator.run` before any output
is written.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TextIO

from bidi_detector.config.schema import ScanConfig, get_default_config
from bidi_detector.core.scanner import ScanResult, scan_text
from bidi_detector.core.selector import FileSelector, SelectionEntry
from bidi_detector.observability.logger import EventType
from bidi_detector.utils.errors import BidiDetectorError, FileReadError, SelectionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileReport:
    """Outcome for one selected path."""

    path: str
    result: ScanResult | None = None
    error: BidiDetectorError | None = None
    skipped: bool = False

    @property
    def count(self) -> int:
        return self.result.count if self.result is not None else 0

    @property
    def passed(self) -> bool:
        return self.count == 0


@dataclass
class RunSummary:
    """Aggregate of a scan run, built incrementally as files are reported."""

    total: int = 0
    reports: list[FileReport] = field(default_factory=list)
    errors: list[BidiDetectorError] = field(default_factory=list)

    def add(self, report: FileReport) -> None:
        self.reports.append(report)
        self.total += report.count
        if report.error is not None:
            self.errors.append(report.error)

    @property
    def files_scanned(self) -> int:
        return sum(1 for r in self.reports if r.result is not None)

    @property
    def failed_files(self) -> list[FileReport]:
        return [r for r in self.reports if not r.passed]

    @property
    def passed(self) -> bool:
        return self.total == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1


def read_text(fs_path: str, display_path: str | None = None) -> str:
    """Read a file in full and decode it strictly as UTF-8.

    Raises:
        FileReadError: Classified by :class:`ReadErrorKind`.
    """
    display_path = display_path or fs_path
    try:
        with open(fs_path, "rb") as f:
            data = f.read()
        return data.decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError.from_exception(display_path, e) from e


def summary_message(total: int) -> str:
    return f"Found {total} potentially dangerous Unicode BIDI characters!"


class ScanOrchestrator:
    """Drive a scan run over the filesystem.

    Args:
        config: Validated configuration (defaults if omitted)
        root: Directory that relative include patterns are expanded from
        stdout: Stream for per-file lines (default: ``sys.stdout`` at run time)
        stderr: Stream for details and errors (default: ``sys.stderr`` at run time)
    """

    def __init__(
        self,
        config: ScanConfig | None = None,
        root: str = os.curdir,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.config = config if config is not None else get_default_config()
        self.root = root
        self._stdout = stdout
        self._stderr = stderr

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def run(self) -> RunSummary:
        """Scan every selected file and return the aggregate.

        Raises:
            PatternError: If an include or exclude pattern is malformed.
        """
        selector = FileSelector(self.config.selection_policy(), self.root)
        jobs = self.config.general.jobs
        logger.info(
            "Scan started",
            extra={"event_type": EventType.RUN_STARTED, "root": self.root, "jobs": jobs},
        )

        summary = RunSummary()
        for report in self._process_all(selector.select(), jobs):
            self._report(report)
            summary.add(report)

        logger.info(
            "Scan completed: %d characters in %d files",
            summary.total,
            summary.files_scanned,
            extra={"event_type": EventType.RUN_COMPLETED, "total": summary.total},
        )
        return summary

    def _process_all(self, entries: Iterable[SelectionEntry], jobs: int) -> Iterator[FileReport]:
        if jobs <= 1:
            for entry in entries:
                yield self.process(entry)
            return
        # map() yields in submission order, so reporting stays deterministic.
        with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="bidi-scan") as executor:
            yield from executor.map(self.process, entries)

    def process(self, entry: SelectionEntry) -> FileReport:
        """Read and scan one selected entry. Performs no output."""
        if entry.error is not None:
            return FileReport(path=entry.path, error=entry.error)
        try:
            content = read_text(entry.fs_path or entry.path, entry.path)
        except FileReadError as e:
            if e.is_invalid_data and self.config.display.ignore_invalid_data:
                return FileReport(path=entry.path, skipped=True)
            return FileReport(path=entry.path, error=e)
        return FileReport(path=entry.path, result=scan_text(content))

    def _report(self, report: FileReport) -> None:
        display = self.config.display

        if report.skipped:
            logger.debug(
                "Skipped %s: not valid UTF-8",
                report.path,
                extra={"event_type": EventType.FILE_SKIPPED},
            )
            return

        if report.error is not None:
            self._report_error(report.error)
            return

        count = report.count
        logger.debug(
            "Scanned %s: %d BIDI characters",
            report.path,
            count,
            extra={"event_type": EventType.FILE_SCANNED, "file_path": report.path, "count": count},
        )
        if count > 0 or display.verbose:
            print(f"{report.path} - {count} BIDI characters", file=self.stdout)

        if display.show_details and report.result is not None:
            for occurrence in report.result.occurrences:
                detail = occurrence.detail
                print(
                    f"Found character {detail.abbreviation} ({detail.name}), "
                    f"{report.path}:{occurrence.line}:{occurrence.column}",
                    file=self.stderr,
                )

    def _report_error(self, error: BidiDetectorError) -> None:
        if isinstance(error, FileReadError):
            print(error.message, file=self.stderr)
            event = EventType.FILE_READ_ERROR
        elif isinstance(error, SelectionError):
            print(f"Could not access {error.path} - {error.reason}", file=self.stderr)
            event = EventType.SELECTION_ERROR
        else:
            print(error.message, file=self.stderr)
            event = EventType.SELECTION_ERROR
        logger.debug(
            str(error),
            extra={"event_type": event, **error.error_details.to_log_dict()},
        )


def run_scan(
    config: ScanConfig | None = None,
    root: str = os.curdir,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> RunSummary:
    """Run one scan with the given configuration."""
    return ScanOrchestrator(config, root=root, stdout=stdout, stderr=stderr).run()

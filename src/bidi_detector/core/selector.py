"""File selection: include and exclude globs over the filesystem."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from bidi_detector.core.patterns import GlobPattern, PathEntry, compile_pattern
from bidi_detector.utils.errors import ErrorCode, SelectionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionPolicy:
    """Ordered include and exclude globs for one run."""

    includes: tuple[str, ...] = ("**/*",)
    excludes: tuple[str, ...] = ()

    def compile(self) -> CompiledPolicy:
        """Compile every pattern up front.

        Raises:
            PatternError: If any include or exclude pattern is malformed.
        """
        return CompiledPolicy(
            includes=tuple(compile_pattern(p) for p in self.includes),
            excludes=tuple(compile_pattern(p) for p in self.excludes),
        )


@dataclass(frozen=True)
class CompiledPolicy:
    includes: tuple[GlobPattern, ...]
    excludes: tuple[GlobPattern, ...]

    def is_excluded(self, path: str) -> bool:
        return matches_any(self.excludes, path)


def matches_any(patterns: Iterable[GlobPattern], path: str) -> bool:
    """True if ``path`` matches at least one of ``patterns``."""
    return any(pattern.matches(path) for pattern in patterns)


@dataclass(frozen=True)
class SelectionEntry:
    """A file chosen for scanning, or an entry that could not be resolved."""

    path: str
    fs_path: str | None = None
    error: SelectionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FileSelector:
    """Yield the regular files selected by a :class:`SelectionPolicy`.

    Include patterns are evaluated independently and in order; a file
    matched by two includes is yielded twice. A file matching any exclude
    pattern is never yielded. Directories and other non-regular files are
    skipped silently; broken symbolic links and unreadable directories are
    yielded as error entries.
    """

    def __init__(self, policy: SelectionPolicy, root: str = os.curdir) -> None:
        self.policy = policy
        self.root = root
        # Fail before any enumeration if a pattern is malformed.
        self._compiled = policy.compile()

    def __iter__(self) -> Iterator[SelectionEntry]:
        return self.select()

    def select(self) -> Iterator[SelectionEntry]:
        for include in self._compiled.includes:
            logger.debug("Expanding include pattern %r", include.pattern)
            for item in include.iter_paths(self.root):
                if isinstance(item, SelectionError):
                    yield SelectionEntry(path=item.path, error=item)
                    continue
                entry = self._classify(item)
                if entry is not None:
                    yield entry

    def _classify(self, item: PathEntry) -> SelectionEntry | None:
        if os.path.isfile(item.fs_path):
            if self._compiled.is_excluded(item.path):
                logger.debug("Excluded %s", item.path)
                return None
            return SelectionEntry(path=item.path, fs_path=item.fs_path)
        if os.path.islink(item.fs_path) and not os.path.exists(item.fs_path):
            if self._compiled.is_excluded(item.path):
                return None
            return SelectionEntry(
                path=item.path,
                error=SelectionError(item.path, ErrorCode.E203_BROKEN_SYMLINK),
            )
        return None


def select(
    includes: Sequence[str],
    excludes: Sequence[str],
    root: str = os.curdir,
) -> Iterator[SelectionEntry]:
    """Convenience wrapper: build a policy and iterate its selection.

    Patterns are compiled before the first entry is produced, so a malformed
    pattern raises ``PatternError`` from this call rather than mid-iteration.
    """
    selector = FileSelector(SelectionPolicy(tuple(includes), tuple(excludes)), root)
    return selector.select()

"""Shell-style glob patterns for file selection.

Two views of the same pattern are provided:

- :meth:`GlobPattern.matches` tests a whole path string. ``*`` and ``?``
  also match ``/``, so ``**/.git/*`` excludes everything below a ``.git``
  directory.
- :meth:`GlobPattern.iter_paths` enumerates the filesystem one path
  component at a time, so ``src/*`` only lists the direct children of
  ``src``. ``**`` as a whole component matches zero or more directories.

Wildcard syntax is that of :mod:`fnmatch`. Hidden entries are matched by
wildcards like any other name, and symbolic links to directories are
followed; a ``**`` walk never re-enters a directory it is already inside.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from bidi_detector.utils.errors import ErrorCode, PatternError, SelectionError

logger = logging.getLogger(__name__)

_WILDCARD_CHARS = frozenset("*?[")

# fnmatch.translate() wraps its output as "(?s:<body>)\Z" ("\z" on newer
# interpreters); the body is reused to join components.
_TRANSLATED = re.compile(r"\(\?s:(?P<body>.*)\)\\[Zz]", re.DOTALL)

_DirIdentity = tuple[int, int]


def _has_wildcard(component: str) -> bool:
    return not _WILDCARD_CHARS.isdisjoint(component)


def _join(prefix: str, name: str) -> str:
    if not prefix or prefix.endswith("/"):
        return prefix + name
    return f"{prefix}/{name}"


def _identity(path: str) -> _DirIdentity | None:
    try:
        st = os.stat(path)
    except OSError:
        # The following listing of ``path`` reports the failure.
        return None
    return st.st_dev, st.st_ino


def _check_classes(component: str, pattern: str) -> None:
    """Reject a ``[`` that fnmatch would silently treat as a literal."""
    i = component.find("[")
    while i != -1:
        j = i + 1
        if j < len(component) and component[j] == "!":
            j += 1
        # A ']' right after the opening bracket is a literal member.
        if j < len(component) and component[j] == "]":
            j += 1
        close = component.find("]", j)
        if close == -1:
            raise PatternError(pattern, "unclosed character class")
        i = component.find("[", close + 1)


def _translate(component: str) -> str:
    match = _TRANSLATED.fullmatch(fnmatch.translate(component))
    if match is None:
        raise RuntimeError(f"unexpected fnmatch translation of {component!r}")
    return match.group("body")


def _compile(regex: str, pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(regex, re.DOTALL)
    except re.error as e:
        raise PatternError(pattern, str(e)) from e


@dataclass(frozen=True)
class PathEntry:
    """A path produced by enumeration.

    ``path`` is the display string (relative to the enumeration root unless
    the pattern was absolute); ``fs_path`` is what to open.
    """

    path: str
    fs_path: str


@dataclass(frozen=True)
class GlobPattern:
    """A compiled, validated glob pattern."""

    pattern: str
    components: tuple[str, ...]
    regex: re.Pattern[str] = field(repr=False, compare=False)
    component_regexes: tuple[re.Pattern[str] | None, ...] = field(repr=False, compare=False)

    def matches(self, path: str) -> bool:
        """Return True if the whole ``path`` string matches the pattern."""
        if os.sep != "/":
            path = path.replace(os.sep, "/")
        return self.regex.fullmatch(path) is not None

    def iter_paths(self, root: str = os.curdir) -> Iterator[PathEntry | SelectionError]:
        """Enumerate existing paths below ``root`` that match the pattern.

        Entries are produced in sorted order within each directory. A
        directory that cannot be listed is yielded as a SelectionError and
        enumeration continues with its siblings.
        """
        prefix = ""
        start = 0
        if self.components and self.components[0] == "":
            prefix = "/"
            start = 1
        yield from self._expand(root, prefix, start)

    def _fs_path(self, root: str, display: str) -> str:
        return os.path.join(root, display) if display else root

    def _expand(
        self,
        root: str,
        prefix: str,
        index: int,
        ancestors: frozenset[_DirIdentity | None] = frozenset(),
    ) -> Iterator[PathEntry | SelectionError]:
        if index == len(self.components):
            if prefix:
                yield PathEntry(path=prefix, fs_path=self._fs_path(root, prefix))
            return

        component = self.components[index]
        last = index == len(self.components) - 1
        directory = self._fs_path(root, prefix)

        if component == "**":
            if last:
                yield from self._descendants(root, prefix, ancestors)
                return
            listing = list(self._list(directory, prefix))
            if listing and listing[0][2] is not None:
                yield listing[0][2]
                return
            yield from self._expand(root, prefix, index + 1)
            inside = ancestors | {_identity(directory)}
            for name, is_dir, _ in listing:
                if not is_dir:
                    continue
                child = _join(prefix, name)
                if _identity(self._fs_path(root, child)) in inside:
                    logger.debug("Not re-entering %s: symbolic link cycle", child)
                    continue
                yield from self._expand(root, child, index, inside)
            return

        regex = self.component_regexes[index]
        if regex is None:
            display = _join(prefix, component)
            fs_path = self._fs_path(root, display)
            if last:
                if os.path.lexists(fs_path):
                    yield PathEntry(path=display, fs_path=fs_path)
            elif os.path.isdir(fs_path):
                yield from self._expand(root, display, index + 1)
            return

        for name, is_dir, error in self._list(directory, prefix):
            if error is not None:
                yield error
                continue
            if regex.fullmatch(name) is None:
                continue
            display = _join(prefix, name)
            if last:
                yield PathEntry(path=display, fs_path=self._fs_path(root, display))
            elif is_dir:
                yield from self._expand(root, display, index + 1)

    def _descendants(
        self,
        root: str,
        prefix: str,
        ancestors: frozenset[_DirIdentity | None],
    ) -> Iterator[PathEntry | SelectionError]:
        directory = self._fs_path(root, prefix)
        inside = ancestors | {_identity(directory)}
        for name, is_dir, error in self._list(directory, prefix):
            if error is not None:
                yield error
                continue
            display = _join(prefix, name)
            fs_path = self._fs_path(root, display)
            yield PathEntry(path=display, fs_path=fs_path)
            if is_dir and _identity(fs_path) not in inside:
                yield from self._descendants(root, display, inside)

    @staticmethod
    def _list(directory: str, prefix: str) -> Iterator[tuple[str, bool, SelectionError | None]]:
        """Sorted (name, is_directory, error) triples for ``directory``.

        ``is_directory`` follows symbolic links.
        """
        try:
            with os.scandir(directory) as it:
                entries = sorted(
                    ((entry.name, entry.is_dir()) for entry in it),
                    key=lambda item: item[0],
                )
        except OSError as e:
            logger.debug("Cannot list %s: %s", directory, e)
            display = prefix or os.curdir
            yield "", False, SelectionError(
                display, ErrorCode.E202_UNREADABLE_DIRECTORY, e.strerror or str(e)
            )
            return
        for name, is_dir in entries:
            yield name, is_dir, None


def compile_pattern(pattern: str) -> GlobPattern:
    """Validate and compile a glob pattern.

    Raises:
        PatternError: If the pattern is empty, has an unclosed character
            class, or uses ``**`` inside a larger path component.
    """
    if not isinstance(pattern, str) or not pattern:
        raise PatternError(str(pattern), "pattern must be a non-empty string")
    if os.sep != "/":
        pattern = pattern.replace(os.sep, "/")

    components = tuple(pattern.split("/"))
    regex_parts: list[str] = []
    component_regexes: list[re.Pattern[str] | None] = []
    for i, component in enumerate(components):
        last = i == len(components) - 1
        if "**" in component and component != "**":
            raise PatternError(pattern, "recursive wildcards must form a single path component")
        if component == "**":
            regex_parts.append(".*" if last else "(?:.*/)?")
            component_regexes.append(None)
            continue
        _check_classes(component, pattern)
        fragment = _translate(component)
        regex_parts.append(fragment if last else fragment + "/")
        component_regexes.append(
            _compile(fragment, pattern) if _has_wildcard(component) else None
        )

    return GlobPattern(
        pattern=pattern,
        components=components,
        regex=_compile("".join(regex_parts), pattern),
        component_regexes=tuple(component_regexes),
    )

"""Scan engine: locate bidirectional control characters in a body of text."""

from __future__ import annotations

from dataclasses import dataclass

from bidi_detector.core.characters import BIDI_CHARACTERS, ControlCharacter, classify


@dataclass(frozen=True)
class Occurrence:
    """One control character found at a 1-based line and character column."""

    line: int
    column: int
    char: str

    @property
    def detail(self) -> ControlCharacter:
        entry = classify(self.char)
        if entry is None:
            raise ValueError(f"U+{ord(self.char):04X} is not a registered control character")
        return entry


@dataclass(frozen=True)
class ScanResult:
    """All occurrences in one text body, in the order they were encountered."""

    occurrences: tuple[Occurrence, ...] = ()

    @property
    def contains_bidi_chars(self) -> bool:
        return bool(self.occurrences)

    @property
    def count(self) -> int:
        return len(self.occurrences)


def scan_text(text: str) -> ScanResult:
    """Find every registered control character in ``text``.

    Lines are delimited by ``"\\n"`` only, so a line ending in ``"\\r\\n"``
    is numbered the same way on every platform; the ``"\\r"`` belongs to the
    terminator and is not scanned. A final line without a terminator is
    still scanned. Columns count characters, not encoded bytes.

    Args:
        text: Any text, including the empty string.

    Returns:
        A ScanResult whose occurrences are ordered by line, then column.
    """
    occurrences: list[Occurrence] = []
    for line_num, line in enumerate(text.split("\n"), start=1):
        if line.endswith("\r"):
            line = line[:-1]
        # Fast path: most lines contain none of the nine characters.
        if BIDI_CHARACTERS.isdisjoint(line):
            continue
        for column, char in enumerate(line, start=1):
            if char in BIDI_CHARACTERS:
                occurrences.append(Occurrence(line=line_num, column=column, char=char))
    return ScanResult(occurrences=tuple(occurrences))

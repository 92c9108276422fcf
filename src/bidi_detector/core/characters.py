"""Registry of the Unicode bidirectional control characters that are flagged.

The table covers the explicit embedding, override and isolate initiators
together with their two terminators (PDF and PDI). Implicit marks such as
U+200E/U+200F are not part of the detection set.
"""

from __future__ import annotations

from dataclasses import dataclass

LRE = "\u202a"
RLE = "\u202b"
PDF = "\u202c"
LRO = "\u202d"
RLO = "\u202e"
LRI = "\u2066"
RLI = "\u2067"
FSI = "\u2068"
PDI = "\u2069"


@dataclass(frozen=True)
class ControlCharacter:
    """Descriptive metadata for one bidirectional control character."""

    char: str
    abbreviation: str
    name: str
    description: str

    @property
    def code_point(self) -> str:
        """Code point in ``U+XXXX`` notation."""
        return f"U+{ord(self.char):04X}"


CONTROL_CHARACTERS: tuple[ControlCharacter, ...] = (
    ControlCharacter(
        LRE,
        "LRE",
        "Left-To-Right Embedding",
        "Try treating following text as left-to-right.",
    ),
    ControlCharacter(
        RLE,
        "RLE",
        "Right-To-Left Embedding",
        "Try treating following text as right-to-left.",
    ),
    ControlCharacter(
        LRO,
        "LRO",
        "Left-to-Right Override",
        "Force treating following text as left-to-right.",
    ),
    ControlCharacter(
        RLO,
        "RLO",
        "Right-to-Left Override",
        "Force treating following text as right-to-left.",
    ),
    ControlCharacter(
        LRI,
        "LRI",
        "Left-to-Right Isolate",
        "Force treating following text as left-to-right without affecting adjacent text.",
    ),
    ControlCharacter(
        RLI,
        "RLI",
        "Right-to-Left Isolate",
        "Force treating following text as right-to-left without affecting adjacent text.",
    ),
    ControlCharacter(
        FSI,
        "FSI",
        "First Strong Isolate",
        "Force treating following text in direction indicated by the next character.",
    ),
    ControlCharacter(
        PDF,
        "PDF",
        "Pop Directional Formatting",
        "Terminate nearest LRE, RLE, LRO, or RLO.",
    ),
    ControlCharacter(
        PDI,
        "PDI",
        "Pop Directional Isolate",
        "Terminate nearest LRI or RLI.",
    ),
)

_BY_CHAR: dict[str, ControlCharacter] = {entry.char: entry for entry in CONTROL_CHARACTERS}
_BY_ABBREVIATION: dict[str, ControlCharacter] = {
    entry.abbreviation: entry for entry in CONTROL_CHARACTERS
}

BIDI_CHARACTERS: frozenset[str] = frozenset(_BY_CHAR)


def classify(char: str | int) -> ControlCharacter | None:
    """Look up a character in the registry.

    Args:
        char: A single-character string or an integer code point.

    Returns:
        The matching entry, or ``None`` if the character is not one of the
        recognized bidirectional control characters.
    """
    if isinstance(char, int):
        if not 0 <= char <= 0x10FFFF:
            return None
        char = chr(char)
    return _BY_CHAR.get(char)


def by_abbreviation(abbreviation: str) -> ControlCharacter | None:
    """Look up an entry by its abbreviation, e.g. ``"rlo"`` or ``"RLO"``."""
    return _BY_ABBREVIATION.get(abbreviation.upper())

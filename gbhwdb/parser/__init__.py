"""
Chip label parsers.

Turns the free-text marking printed on a chip package into structured facts:
part kind, manufacturer and a date code. Each known marking format is one
SingleParser (a verbose regex plus a builder for the captured groups); a
MultiParser tries a family of formats and returns the first that builds.

Date codes on packages are often incomplete:
- Two-digit years (``9743``) resolve directly (88-99 -> 19xx, 00-87 -> 20xx)
- One-digit years (``802``) only give the last digit of the year; the
  decade is resolved later against a year hint (usually the board's year)

An unrecognized label makes ``parse()`` raise LabelParseError;
``try_parse()`` returns None instead.
"""

import re
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence

from gbhwdb.exceptions import LabelParseError
from gbhwdb.logging_config import get_logger

logger = get_logger("metadata")


# ============================================================================
# Parsed Facts
# ============================================================================


@dataclass(frozen=True)
class ParsedLabel:
    """
    Facts read from one chip marking.

    Attributes:
        kind: Part kind (e.g. "MBC3A", "LH534M")
        manufacturer: Manufacturer code, if the marking identifies it
        year: Full year, if known
        year_digit: Last digit of the year when only that is printed
        week: Week of the year
        rom_id: ROM ID printed on mask ROMs (e.g. "DMG-AAUJ-1")
    """
    kind: Optional[str] = None
    manufacturer: Optional[str] = None
    year: Optional[int] = None
    year_digit: Optional[int] = None
    week: Optional[int] = None
    rom_id: Optional[str] = None

    # Remaining calendar fields read by the display formatters
    month = None
    date_range = None

    def with_year_hint(self, hint: Optional[int]) -> "ParsedLabel":
        """Resolve a one-digit year against a nearby full year."""
        if self.year is not None or self.year_digit is None or hint is None:
            return self
        return replace(self, year=guess_full_year(hint, self.year_digit))


# ============================================================================
# Date Code Helpers
# ============================================================================


def year2(text: str) -> int:
    """
    Two-digit year code to a full year.

    "AL" and "AA" are Sharp codes for 2000 and 2001.

    Raises:
        ValueError: If the text is not a two-digit year code
    """
    if text == "AL":
        return 2000
    if text == "AA":
        return 2001
    if len(text) != 2 or not text.isdigit():
        raise ValueError(f"Invalid 2-digit year: {text}")
    value = int(text)
    return value + 1900 if value >= 88 else value + 2000


def year1(text: str) -> int:
    """
    One-digit year code.

    Raises:
        ValueError: If the text is not a single digit
    """
    if len(text) != 1 or not text.isdigit():
        raise ValueError(f"Invalid 1-digit year: {text}")
    return int(text)


def week2(text: str) -> int:
    """
    Two-digit week code (01-53).

    Raises:
        ValueError: If the text is not a valid week
    """
    if len(text) != 2 or not text.isdigit() or not 1 <= int(text) <= 53:
        raise ValueError(f"Invalid 2-digit week: {text}")
    return int(text)


def guess_full_year(hint: int, digit: int) -> int:
    """
    Pick the year ending in ``digit`` closest to ``hint``.

    Example:
        >>> guess_full_year(1998, 9)
        1999
        >>> guess_full_year(2005, 0)
        2000
    """
    return min((decade + digit for decade in (1980, 1990, 2000)), key=lambda y: abs(hint - y))


# ============================================================================
# Parsers
# ============================================================================


class SingleParser:
    """
    One marking format.

    Args:
        name: Format name used in log messages
        pattern: Verbose regular expression matched against the whole label
        build: Builds the parsed facts from the match; may raise ValueError
            for captured values that are out of range
    """

    def __init__(self, name: str, pattern: str, build: Callable[[re.Match], ParsedLabel]):
        self.name = name
        self.regex = re.compile(pattern, re.VERBOSE)
        self._build = build

    def matches(self, label: str) -> bool:
        return self.regex.fullmatch(label) is not None

    def parse(self, label: str) -> ParsedLabel:
        match = self.regex.fullmatch(label)
        if match is None:
            raise LabelParseError(label)
        try:
            return self._build(match)
        except ValueError as e:
            raise LabelParseError(label, str(e))

    def try_parse(self, label: str) -> Optional[ParsedLabel]:
        try:
            return self.parse(label)
        except LabelParseError:
            return None


class MultiParser:
    """
    A family of marking formats tried in order.

    A label matched by more than one format is logged as a warning.
    """

    def __init__(self, name: str, parsers: Sequence[SingleParser]):
        self.name = name
        self.parsers: List[SingleParser] = list(parsers)

    def parse(self, label: str) -> ParsedLabel:
        matching = [parser for parser in self.parsers if parser.matches(label)]
        if len(matching) > 1:
            logger.warning(
                f"Multiple {self.name} formats match '{label}': "
                f"{', '.join(parser.name for parser in matching)}"
            )
        for parser in matching:
            parsed = parser.try_parse(label)
            if parsed is not None:
                return parsed
        raise LabelParseError(label)

    def try_parse(self, label: str) -> Optional[ParsedLabel]:
        try:
            return self.parse(label)
        except LabelParseError:
            return None

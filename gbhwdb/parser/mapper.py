"""
Mapper chip label formats.

Every format yields the mapper kind as written in metadata (``MBC1B``,
``HuC-1A``, ...), so a parsed kind can be classified with the same
MAPPER_KINDS table as an explicit one.

Example:
    >>> parse_mapper("MBC3 A LR38536B 9935 A")
    ParsedLabel(kind='MBC3A', manufacturer='sharp', year=1999, year_digit=None, week=35, rom_id=None)
"""

from typing import Callable, Optional

from gbhwdb.parser import MultiParser, ParsedLabel, SingleParser, week2, year1, year2


def _mapper(
    name: str,
    pattern: str,
    kind: str,
    manufacturer: Optional[str] = None,
    year: Callable[[str], int] = year2,
) -> SingleParser:
    """
    Build a mapper format.

    The pattern captures ``year`` and, where printed, ``week``. With
    ``year=year1`` the single digit is kept as ``year_digit``.
    """
    def build(match) -> ParsedLabel:
        groups = match.groupdict()
        week = week2(groups["week"]) if groups.get("week") else None
        if year is year1:
            return ParsedLabel(
                kind=kind, manufacturer=manufacturer,
                year_digit=year1(groups["year"]), week=week,
            )
        return ParsedLabel(
            kind=kind, manufacturer=manufacturer,
            year=year(groups["year"]), week=week,
        )

    return SingleParser(name, pattern, build)


_YW2 = r"(?P<year>[0-9]{2})(?P<week>[0-9]{2})"
_YW1 = r"(?P<year>[0-9])(?P<week>[0-9]{2})"


# ============================================================================
# Sharp
# ============================================================================

SHARP_MBC1A = _mapper(
    "Sharp MBC1A", rf"DMG\ MBC1A\ Nintendo\ S\ {_YW2}\ [0-9]\ [A-Z]{{1,2}}", "MBC1A", "sharp",
)
SHARP_MBC1B = _mapper(
    "Sharp MBC1B", rf"DMG\ MBC1B\ Nintendo\ S\ {_YW2}\ [0-9]\ [A-Z]{{1,2}}", "MBC1B", "sharp",
)
SHARP_MBC1B1 = _mapper(
    "Sharp MBC1B1", rf"DMG\ MBC1B1\ Nintendo\ S\ {_YW2}\ [0-9]\ [A-Z]{{1,2}}", "MBC1B1", "sharp",
)
SHARP_MBC2A = _mapper(
    "Sharp MBC2A", rf"DMG\ MBC2A\ Nintendo\ S\ {_YW2}\ [0-9]\ [A-Z]{{1,2}}", "MBC2A", "sharp",
)
SHARP_MBC3 = _mapper("Sharp MBC3", rf"MBC3\ LR385364\ {_YW2}\ [A-Z]", "MBC3", "sharp")
SHARP_MBC3A = _mapper("Sharp MBC3A", rf"MBC3\ A\ LR38536B\ {_YW2}\ [A-Z]", "MBC3A", "sharp")
SHARP_MBC5 = _mapper(
    "Sharp MBC5",
    r"MBC5\ LZ9GB31\ (?P<year>[A-Z0-9]{2})(?P<week>[0-9]{2})\ [A-Z]",
    "MBC5", "sharp",
)

# ============================================================================
# NEC, Motorola, Texas Instruments
# ============================================================================

NEC_MBC1B = _mapper("NEC MBC1B", rf"Nintendo\ DMG\ MBC1B\ N\ {_YW2}BA[0-9]{{3}}", "MBC1B", "nec")
NEC_MBC2A = _mapper("NEC MBC2A", rf"Nintendo\ DMG\ MBC2A\ N\ {_YW2}CA[0-9]{{3}}", "MBC2A", "nec")
NEC_LIKE_MBC6 = _mapper("NEC-like MBC6", rf"Nintendo\ MBC6\ {_YW2}XPO[0-9]{{2}}", "MBC6")
MOTOROLA_MBC1B = _mapper(
    "Motorola MBC1B", rf"DMG\ MBC1B\ Nintendo\ J{_YW2}BR", "MBC1B", "motorola",
)
TI_MBC5 = _mapper(
    "Texas Instruments MBC5",
    r"(?P<year>[0-9])[A-Z0-9][A-Z][A-Z0-9]{3}T\ MBC5\ 2417",
    "MBC5", "ti", year=year1,
)
UNKNOWN_MBC1B = _mapper("Unknown MBC1B", rf"Nintendo\ DMG\ MBC1B\ {_YW2}AJ", "MBC1B")
UNKNOWN_MBC1B_N = _mapper(
    "Unknown MBC1B (N)", rf"Nintendo\ DMG\ MBC1B\ N{_YW2}B[0-9]{{4}}", "MBC1B",
)

# ============================================================================
# "P" markings (manufacturer unknown)
# ============================================================================

P_MBC1B = _mapper(
    "P MBC1B", r"DMG\ MBC1-B\ Nintendo\ P\ (?P<year>[0-9])'[A-Z0-9][0-9]", "MBC1B", year=year1,
)
P_MBC2A = _mapper(
    "P MBC2A", r"DMG\ MBC2-A\ Nintendo\ P\ (?P<year>[0-9])'[A-Z0-9][0-9]", "MBC2A", year=year1,
)
P_MBC3A = _mapper("P MBC3A", rf"MBC3\ A\ P-2\ {_YW1}U[0-9][A-Z]", "MBC3A", year=year1)
P_MBC3B = _mapper("P MBC3B", rf"MBC3\ B\ P-2\ {_YW1}U[0-9][A-Z]", "MBC3B", year=year1)
P_MBC30 = _mapper("P MBC30", rf"MBC30\ P\ {_YW1}[A-Z0-9][0-9][A-Z]", "MBC30", year=year1)
P_MBC5 = _mapper("P MBC5", rf"MBC5\ P(-[0-9])?\ {_YW1}U[0-9][A-Z]", "MBC5", year=year1)

# ============================================================================
# ROHM
# ============================================================================

ROHM_MBC3 = _mapper(
    "ROHM MBC3", rf"MBC3\ BU3631K\ {_YW1}\ [0-9]{{3}}", "MBC3", "rohm", year=year1,
)
ROHM_MBC3A = _mapper(
    "ROHM MBC3A", rf"MBC-3\ A\ BU3632K\ {_YW1}\ [A-Z0-9]{{3}}", "MBC3A", "rohm", year=year1,
)
ROHM_MBC3B = _mapper(
    "ROHM MBC3B", rf"MBC-3\ B\ BU3634K\ {_YW1}\ H[0-9]{{2}}", "MBC3B", "rohm", year=year1,
)
ROHM_MBC30 = _mapper(
    "ROHM MBC30", rf"MBC-30\ BU3633AK\ {_YW1}\ [0-9]{{3}}", "MBC30", "rohm", year=year1,
)
ROHM_MBC5 = _mapper(
    "ROHM MBC5", rf"MBC-?5\ BU3650K\ {_YW1}\ [A-Z0-9][0-9]{{2}}", "MBC5", "rohm", year=year1,
)
ROHM_MBC7 = _mapper(
    "ROHM MBC7", rf"MBC-7\ BU3667KS\ {_YW1}\ [0-9]{{3}}", "MBC7", "rohm", year=year1,
)

# ============================================================================
# Hudson and others
# ============================================================================

HUDSON_HUC1 = _mapper(
    "Hudson HuC-1", rf"HuC-1\ ©\ HUDSON\ Nintendo\ {_YW2}\ [A-Z]", "HuC-1", "hudson",
)
HUDSON_HUC1A = _mapper(
    "Hudson HuC-1A", rf"HuC1A\ ©\ HUDSON\ Nintendo\ {_YW2}\ [A-Z]", "HuC-1A", "hudson",
)
HUDSON_HUC3 = _mapper(
    "Hudson HuC-3", rf"HuC-3\ ©\ HUDSON\ Nintendo\ {_YW2}\ [A-Z]", "HuC-3", "hudson",
)
MMM01 = _mapper("MMM01", rf"MMM01\ {_YW1}\ [0-9]{{3}}", "MMM01", year=year1)


MAPPER = MultiParser("mapper", [
    SHARP_MBC1A, SHARP_MBC1B, SHARP_MBC1B1, SHARP_MBC2A, SHARP_MBC3, SHARP_MBC3A, SHARP_MBC5,
    NEC_MBC1B, NEC_MBC2A, NEC_LIKE_MBC6,
    P_MBC1B, P_MBC2A, P_MBC3A, P_MBC3B, P_MBC30, P_MBC5,
    ROHM_MBC3, ROHM_MBC3A, ROHM_MBC3B, ROHM_MBC30, ROHM_MBC5, ROHM_MBC7,
    TI_MBC5, MOTOROLA_MBC1B, UNKNOWN_MBC1B, UNKNOWN_MBC1B_N,
    HUDSON_HUC1, HUDSON_HUC1A, HUDSON_HUC3, MMM01,
])


def parse_mapper(label: str) -> ParsedLabel:
    """
    Parse a mapper chip label.

    Raises:
        LabelParseError: If no known format matches
    """
    return MAPPER.parse(label)

"""
Mask ROM label formats.

A mask ROM marking always repeats the cartridge ROM ID and usually names
the chip type and manufacturer; most formats also carry a date code.
"""

from typing import Optional

from gbhwdb.parser import MultiParser, ParsedLabel, SingleParser, week2, year1, year2

# Sharp chip codes as printed, mapped to the catalogue part number
SHARP_CHIP_TYPES = {
    "LH5359": "LH53259",
    "LH5317": "LH53517",
    "LH531H": "LH530800A",
    "LH5308": "LH530800",
    "LH5314": "LH53514",
    "LH5321": "LH532100",
}

_ROM_ID = r"(?P<rom_id>(DMG|CGB)-[A-Z0-9]{3,4}-[0-9])"
_OLD_ROM_ID = r"(?P<rom_id>DMG-[A-Z0-9]{3}-[0-9])"


def _mask_rom(
    name: str,
    pattern: str,
    manufacturer: Optional[str],
    kind_prefix: str = "",
    one_digit_year: bool = False,
) -> SingleParser:
    def build(match) -> ParsedLabel:
        groups = match.groupdict()
        kind = groups.get("kind")
        if kind is not None:
            kind = kind_prefix + kind
        year = year_digit = week = None
        if groups.get("year"):
            if one_digit_year:
                year_digit = year1(groups["year"])
            else:
                year = year2(groups["year"])
        if groups.get("week"):
            week = week2(groups["week"])
        return ParsedLabel(
            kind=kind, manufacturer=manufacturer, year=year,
            year_digit=year_digit, week=week, rom_id=groups["rom_id"],
        )

    return SingleParser(name, pattern, build)


def _sharp_build(match) -> ParsedLabel:
    code = match["kind"]
    return ParsedLabel(
        kind=SHARP_CHIP_TYPES.get(code, code),
        manufacturer="sharp",
        year=year2(match["year"]),
        week=week2(match["week"]),
        rom_id=match["rom_id"],
    )


SHARP = SingleParser(
    "Sharp",
    rf"{_ROM_ID}\ S\ (?P<kind>LH[A-Z0-9]{{4}})[A-Z0-9]{{2}}\ JAPAN\ [A-Z][0-9]?\ "
    r"(?P<year>[0-9]{2})(?P<week>[0-9]{2})\ [A-Z]",
    _sharp_build,
)
SHARP_OLD = _mask_rom(
    "Sharp (no chip type)",
    rf"{_OLD_ROM_ID}\ SHARP\ JAPAN\ [A-Z][0-9]?\ (?P<year>[0-9]{{2}})(?P<week>[0-9]{{2}})\ [A-Z]",
    "sharp",
)
SHARP_OLD2 = _mask_rom(
    "Sharp (no chip type, late date code)",
    rf"{_OLD_ROM_ID}\ SHARP\ JAPAN\ (?P<year>[0-9]{{2}})(?P<week>[0-9]{{2}})\ [A-Z]\ [A-Z]",
    "sharp",
)
SHARP_GLOP_TOP = _mask_rom(
    "Sharp glop top",
    rf"(?P<kind>LR0G150)\ {_OLD_ROM_ID}\ (?P<year>[0-9]{{2}})(?P<week>[0-9]{{2}})[0-9]",
    None,
)
MACRONIX = _mask_rom(
    "Macronix MX23C",
    r"[aA-Z](?P<year>[0-9]{2})(?P<week>[0-9]{2})[0-9]{2}-MG?\ "
    r"(?P<kind>MX23C[0-9]{4,5}-[0-9]{2}[A-Z]?[0-9]?)\ ([0-9]\ )?"
    rf"{_ROM_ID}\ ([0-9][0-9]\ )?[A-Z][0-9]?\ [0-9][A-Z0-9]{{7,9}}",
    "macronix",
)
MACRONIX_OLD = _mask_rom(
    "Macronix MX23C (old)",
    r"[A-Z](?P<year>[0-9]{2})(?P<week>[0-9]{2})-M\ "
    r"(?P<kind>MX23C[0-9]{4}-[0-9]{2}[A-Z]?[0-9]?)\ "
    rf"{_ROM_ID}\ [A-Z][0-9]?\ [A-Z0-9]{{6}}",
    "macronix",
)
OKI_OLD = _mask_rom(
    "OKI (no chip type)",
    rf"{_OLD_ROM_ID}\ OKI\ JAPAN\ [A-Z0-9]{{2}}\ [0-9]{{2}}\ [A-Z0-9]{{2}}\ [0-9]{{2}}",
    "oki",
)
OKI_MSM53X011E = _mask_rom(
    "OKI MSM53x011E",
    rf"{_ROM_ID}\ [A-Z][0-9]\ (?P<kind>M53[48]011E)-[A-Z0-9]{{2}}\ "
    r"(?P<year>[0-9])(?P<week>[0-9]{2})[0-9]{3}[A-Z0-9]",
    "oki", kind_prefix="MS", one_digit_year=True,
)
OKI_MR531614G = _mask_rom(
    "OKI MR531614G",
    rf"{_ROM_ID}\ [A-Z][0-9]\ (?P<kind>R531614G)-[A-Z0-9]{{2}}\ "
    r"(?P<year>[0-9])(?P<week>[0-9]{2})[0-9]{3}[A-Z0-9]",
    "oki", kind_prefix="M", one_digit_year=True,
)
NEC = _mask_rom(
    "NEC",
    rf"NEC\ JAPAN\ {_ROM_ID}\ [A-Z][0-9]\ (?P<kind>UPD23C[0-9]{{4}}[A-Z0-9]{{3,4}})-[A-Z][0-9]{{2}}\ "
    r"(?P<year>[0-9]{2})(?P<week>[0-9]{2})[A-Z][0-9]{4}",
    "nec",
)
NEC_LIKE = _mask_rom(
    "NEC-like",
    rf"{_ROM_ID}\ [A-Z][0-9]\ (?P<kind>N-[0-9]{{4}}[A-Z0-9]{{3,4}})-[A-Z][0-9]{{2}}\ "
    r"(?P<year>[0-9]{2})(?P<week>[0-9]{2})[A-Z][0-9]{4}",
    "nec",
)
AT_T = _mask_rom(
    "AT&T",
    rf"Ⓜ\ AT&T\ JAPAN\ {_ROM_ID}\ [A-Z][0-9]\ (?P<kind>23C[0-9]{{4}}[A-Z0-9]{{3,4}})-[A-Z][0-9]{{2}}\ "
    r"(?P<year>[0-9]{2})(?P<week>[0-9]{2})[A-Z][0-9]{4}",
    "at_t",
)
SMSC = _mask_rom(
    "Standard Microsystems",
    rf"STANDARD\ MICRO\ {_ROM_ID}\ [A-Z][0-9]\ (?P<kind>23C[0-9]{{4}}[A-Z0-9]{{3,4}})-[A-Z][0-9]{{2}}\ "
    r"(?P<year>[0-9]{2})(?P<week>[0-9]{2})[A-Z][0-9]{4}",
    "smsc",
)
MANI = _mask_rom(
    "Mani",
    rf"MANI\ {_ROM_ID}\ (?P<kind>23C[0-9]{{4}}[A-Z0-9]{{3,4}})-[A-Z][0-9]{{2}}\ "
    r"(?P<year>[0-9]{2})(?P<week>[0-9]{2})[A-Z][0-9]{4}",
    "mani",
)
TOSHIBA = _mask_rom(
    "Toshiba",
    r"TOSHIBA\ (?P<year>[0-9]{2})(?P<week>[0-9]{2})EAI\ (?P<kind>TC53[0-9]{4}[A-Z]{2})\ "
    rf"{_ROM_ID}\ [A-Z][0-9]\ [A-Z][0-9]{{3}}\ JAPAN",
    "toshiba",
)
SAMSUNG = _mask_rom(
    "Samsung",
    rf"SEC\ (?P<kind>KM23C[0-9]{{4,5}}[A-Z]{{1,2}})\ {_ROM_ID}\ [A-Z][0-9]\ [A-Z0-9]{{10}}",
    "samsung",
)
SAMSUNG_OLD = _mask_rom(
    "Samsung (old)",
    rf"SEC\ (?P<kind>KM23C[0-9]{{4,5}}[A-Z]{{1,2}})\ {_ROM_ID}\ [A-Z][0-9]\ KF[A-Z0-9]{{4}}[A-Z]",
    "samsung",
)
FUJITSU = _mask_rom(
    "Fujitsu",
    rf"JAPAN\ {_ROM_ID}\ [A-Z][0-9]\ [0-9][A-Z][A-Z0-9]\ [A-Z]{{2}}\ "
    r"(?P<year>[0-9]{2})(?P<week>[0-9]{2})\ [A-Z][0-9]{2}",
    "fujitsu",
)


MASK_ROM = MultiParser("mask ROM", [
    SHARP, SHARP_OLD, SHARP_OLD2, SHARP_GLOP_TOP,
    MACRONIX, MACRONIX_OLD,
    OKI_OLD, OKI_MSM53X011E, OKI_MR531614G,
    NEC, NEC_LIKE, AT_T, SMSC, MANI,
    TOSHIBA, SAMSUNG, SAMSUNG_OLD, FUJITSU,
])


def parse_mask_rom(label: str) -> ParsedLabel:
    """
    Parse a mask ROM label.

    Raises:
        LabelParseError: If no known format matches
    """
    return MASK_ROM.parse(label)

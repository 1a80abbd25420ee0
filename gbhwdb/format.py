"""
Display formatting helpers.

Pure functions shared by the CSV export and external page renderers:
- calendar() / calendar_short(): Partial manufacturing dates
- manufacturer_name(): Manufacturer code -> display name
- optional(): The "????" (unknown) / "-" (verified absent) convention, fed
  by field_value()
- console_name() / mapper_name(): Display names for type and mapper ids
"""

from typing import Any, Callable, Optional, Sequence

from gbhwdb.schemas import MISSING, field_value  # noqa: F401 (re-exported)
from gbhwdb.schemas.cartridge import MAPPER_NAMES, UNCLASSIFIED
from gbhwdb.schemas.registry import CONSOLES

UNKNOWN = "????"
ABSENT = "-"

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
SHORT_MONTH_NAMES = tuple(name[:3] for name in MONTH_NAMES)

MANUFACTURER_NAMES = {
    "amic": "AMIC Technology",
    "analog": "Analog Devices",
    "at_t": "AT&T Technologies",
    "bsi": "BSI",
    "crosslink": "Crosslink Semiconductor",
    "fujitsu": "Fujitsu",
    "hudson": "Hudson",
    "hynix": "Hynix",
    "hyundai": "Hyundai",
    "kds": "Daishinku",
    "kinseki": "Kinseki",
    "lgs": "Lucky GoldStar",
    "lsi_logic": "LSI Logic",
    "macronix": "Macronix",
    "magnachip": "Magnachip",
    "mani": "Mani Ltd.",
    "mitsubishi": "Mitsubishi",
    "mitsumi": "Mitsumi",
    "mosel_vitelic": "Mosel-Vitelic",
    "motorola": "Motorola",
    "nec": "NEC",
    "oki": "OKI",
    "rohm": "ROHM",
    "samsung": "Samsung",
    "sanyo": "Sanyo",
    "sharp": "Sharp",
    "smsc": "Standard Microsystems Corporation",
    "st": "STMicroelectronics",
    "tdk": "TDK",
    "ti": "Texas Instruments",
    "toshiba": "Toshiba",
    "victronix": "Victronix",
    "winbond": "Winbond",
}


# ============================================================================
# Calendar
# ============================================================================


def _calendar(value: Any, month_names: Sequence[str], week_prefix: str) -> str:
    year = getattr(value, "year", None)
    month = getattr(value, "month", None)
    week = getattr(value, "week", None)
    date_range = getattr(value, "date_range", None)

    year_text = str(year) if year is not None else UNKNOWN

    qualifier: Optional[str] = None
    if month is not None:
        qualifier = month_names[month - 1]
    elif week is not None:
        qualifier = f"{week_prefix}{week}"
    elif date_range is not None:
        start, end = date_range
        if start.month is not None and end.month is not None:
            qualifier = f"{month_names[start.month - 1]}-{month_names[end.month - 1]}"

    if qualifier is None:
        return year_text
    return f"{qualifier}/{year_text}"


def calendar(value: Any) -> str:
    """
    Format a partial date for detail views.

    Exactly one qualifier is used, in priority order month > week >
    date_range; a missing year renders as "????".

    Example:
        >>> calendar(Calendar(year=1998, week=12))
        'Week 12/1998'
        >>> calendar(Calendar(year=1998, month=3, week=12))
        'March/1998'
    """
    return _calendar(value, MONTH_NAMES, "Week ")


def calendar_short(value: Any) -> str:
    """
    Format a partial date for table cells.

    Example:
        >>> calendar_short(Calendar(year=1998, week=12))
        '12/1998'
        >>> calendar_short(Calendar(year=1998, month=3))
        'Mar/1998'
    """
    return _calendar(value, SHORT_MONTH_NAMES, "")


# ============================================================================
# Lookups
# ============================================================================


def manufacturer_name(code: str) -> str:
    """Display name of a manufacturer code; unknown codes pass through."""
    return MANUFACTURER_NAMES.get(code, code)


def console_name(type_id: str) -> str:
    descriptor = CONSOLES.get(type_id)
    return descriptor.name if descriptor else type_id


def mapper_name(mapper_id: Optional[str]) -> str:
    if mapper_id is None:
        return UNKNOWN
    if mapper_id == UNCLASSIFIED:
        return "Unclassified"
    return MAPPER_NAMES.get(mapper_id, mapper_id)


# ============================================================================
# Optional Values
# ============================================================================


def optional(value: Any, formatter: Callable[[Any], str] = str) -> str:
    """
    Render a possibly-unknown value.

    Args:
        value: MISSING (never recorded), None (verified absent) or a value
        formatter: Applied to present values

    Returns:
        "????" for MISSING, "-" for None, otherwise formatter(value)
    """
    if value is MISSING:
        return UNKNOWN
    if value is None:
        return ABSENT
    return formatter(value)

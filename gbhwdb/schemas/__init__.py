"""
Shared metadata sub-schemas.

Provides the Pydantic building blocks every hardware schema is made of:
- Calendar / DateRangePart: Partial manufacturing dates
- Chip: One populated component position on a board
- MISSING / field_value(): Distinguish an omitted field from an explicit null

Unknown keys are rejected everywhere and validated models are frozen, so
what flows downstream of the reader is type- and range-valid and immutable.
"""

from typing import Annotated, Any, Literal, Optional, Tuple, get_args

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Constants
# ============================================================================

MIN_YEAR = 1988
MAX_YEAR = 2010

Year = Annotated[int, Field(ge=MIN_YEAR, le=MAX_YEAR)]
Month = Annotated[int, Field(ge=1, le=12)]
Week = Annotated[int, Field(ge=1, le=53)]

Manufacturer = Literal[
    "amic", "analog", "at_t", "bsi", "crosslink", "fujitsu", "hudson",
    "hynix", "hyundai", "kds", "kinseki", "lgs", "lsi_logic", "macronix",
    "mitsubishi", "mitsumi", "mosel_vitelic", "motorola", "nec", "oki",
    "rohm", "samsung", "sanyo", "sharp", "smsc", "st", "tdk", "ti",
    "toshiba", "victronix", "winbond",
]

MANUFACTURER_CODES = get_args(Manufacturer)


# ============================================================================
# Missing-value sentinel
# ============================================================================


class _Missing:
    """Marker for a field that was never filled in (as opposed to null)."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def field_value(model: Optional[BaseModel], name: str) -> Any:
    """
    Read a field while keeping "omitted" and "null" apart.

    Args:
        model: Validated model, or None / MISSING when the parent object
            is absent, so lookups can be chained
        name: Field name

    Returns:
        MISSING if the parent is absent or the field was omitted from the
        source document, otherwise the field value (which may be None for
        an explicit null)

    Example:
        >>> chip = Chip.model_validate({"label": None})
        >>> field_value(chip, "label") is None
        True
        >>> field_value(chip, "kind") is MISSING
        True
    """
    if model is None or model is MISSING or name not in model.model_fields_set:
        return MISSING
    return getattr(model, name)


# ============================================================================
# Base Models
# ============================================================================


class SchemaModel(BaseModel):
    """Base for metadata models: strict keys, immutable after validation."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class DateRangePart(SchemaModel):
    """One endpoint of a manufacturing date expressed as a month range."""
    month: Optional[Month] = None
    part: Optional[str] = Field(None, max_length=16, description="Part of the month, e.g. 'early'")


class Calendar(SchemaModel):
    """
    Partial manufacturing date.

    A real marking carries either a month or a week code; the schema does not
    enforce exclusivity, the formatters pick month > week > date_range.
    """
    year: Optional[Year] = None
    month: Optional[Month] = None
    week: Optional[Week] = None
    date_range: Optional[Tuple[DateRangePart, DateRangePart]] = None


class Chip(Calendar):
    """
    One populated component position on a board.

    ``label: null`` records a position verified to carry no marking;
    an omitted label means nobody has inspected it.
    """
    kind: Optional[str] = Field(None, description="Chip type or part marking")
    label: Optional[str] = Field(None, description="Marking on the package")
    manufacturer: Optional[Manufacturer] = None
    rom_code: Optional[str] = None
    outlier: bool = Field(False, description="Known to deviate from the expected pattern")

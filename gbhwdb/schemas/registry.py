"""
Hardware type registry.

Every supported hardware type is described by a HardwareDescriptor: the
directory name contributors use, a display name, the expected photo
filenames and a tree of BoardSpec entries from which the Pydantic metadata
model is generated.

Key Concepts:
- BoardSpec: One object level of a metadata document (the shell, the
  mainboard, a sub-board or panel). Lists its free-text fields, its chip
  slots and its nested child boards.
- PhotoRole: Logical photo role mapped to a fixed filename.
- One generic model builder: console variants differ only in data, so
  field lists live here instead of ten hand-written model classes.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Type

from pydantic import create_model

from gbhwdb.schemas import Calendar, Chip, SchemaModel


# ============================================================================
# Descriptor Types
# ============================================================================


@dataclass(frozen=True)
class BoardSpec:
    """
    Shape of one object level of a metadata document.

    Attributes:
        key: Key of this object in its parent (``metadata`` for the top level)
        fields: Free-text string fields
        chips: Chip slot names
        calendar: Whether the object carries year/month/week/date_range
        required: Whether the parent must contain this object
        required_fields: Subset of ``fields`` that must be present
        children: Nested boards
    """
    key: str
    fields: Tuple[str, ...] = ()
    chips: Tuple[str, ...] = ()
    calendar: bool = True
    required: bool = False
    required_fields: Tuple[str, ...] = ()
    children: Tuple["BoardSpec", ...] = ()


@dataclass(frozen=True)
class PhotoRole:
    """Logical photo role and the filename it is stored under."""
    key: str
    filename: str


@dataclass(frozen=True)
class HardwareDescriptor:
    """
    Everything the pipeline needs to know about one hardware type.

    Attributes:
        id: Stable type id (``dmg``, ``cgb``, ..., ``cartridge``)
        directory: Type directory name in the submission tree, or None when
            the directory is an open-ended ROM-ID (cartridges)
        name: Display name
        shell: Top-level BoardSpec
        photos: Expected photo roles, in display order
        model: Generated Pydantic model validating metadata.json
    """
    id: str
    directory: Optional[str]
    name: str
    shell: BoardSpec
    photos: Tuple[PhotoRole, ...]
    model: Type[SchemaModel]

    @property
    def photo_keys(self) -> Tuple[str, ...]:
        return tuple(role.key for role in self.photos)


# ============================================================================
# Model Generation
# ============================================================================


def _camel(key: str) -> str:
    return "".join(part.capitalize() for part in key.split("_"))


def build_model(spec: BoardSpec, prefix: str) -> Type[SchemaModel]:
    """
    Generate a Pydantic model class from a BoardSpec tree.

    Args:
        spec: Board specification
        prefix: Model class name prefix (e.g. "Dmg")

    Returns:
        Model class named ``<prefix><CamelKey>``; boards with a calendar
        inherit the Calendar fields

    Example:
        >>> model = build_model(BoardSpec("metadata", fields=("color",)), "Dmg")
        >>> model.__name__
        'DmgMetadata'
    """
    definitions: Dict[str, Any] = {}

    for name in spec.fields:
        if name in spec.required_fields:
            definitions[name] = (str, ...)
        else:
            definitions[name] = (Optional[str], None)

    for slot in spec.chips:
        definitions[slot] = (Optional[Chip], None)

    for child in spec.children:
        child_model = build_model(child, prefix)
        if child.required:
            definitions[child.key] = (child_model, ...)
        else:
            definitions[child.key] = (Optional[child_model], None)

    base = Calendar if spec.calendar else SchemaModel
    return create_model(f"{prefix}{_camel(spec.key)}", __base__=base, **definitions)


def _descriptor(
    type_id: str,
    directory: Optional[str],
    name: str,
    shell: BoardSpec,
    photos: Tuple[PhotoRole, ...],
) -> HardwareDescriptor:
    return HardwareDescriptor(
        id=type_id,
        directory=directory,
        name=name,
        shell=shell,
        photos=photos,
        model=build_model(shell, _camel(type_id)),
    )


def _mainboard(fields: Tuple[str, ...], chips: Tuple[str, ...]) -> BoardSpec:
    return BoardSpec(
        "mainboard",
        fields=fields,
        chips=chips,
        required=True,
        required_fields=("type",),
    )


# ============================================================================
# Photo Roles
# ============================================================================

DEFAULT_PHOTOS = (
    PhotoRole("front", "01_front.jpg"),
    PhotoRole("back", "02_back.jpg"),
    PhotoRole("pcb_front", "03_pcb_front.jpg"),
    PhotoRole("pcb_back", "04_pcb_back.jpg"),
)

AGS_PHOTOS = (
    PhotoRole("front", "01_front.jpg"),
    PhotoRole("top", "02_top.jpg"),
    PhotoRole("back", "03_back.jpg"),
    PhotoRole("pcb_front", "04_pcb_front.jpg"),
    PhotoRole("pcb_back", "05_pcb_back.jpg"),
)

DMG_PHOTOS = (
    PhotoRole("front", "01_front.jpg"),
    PhotoRole("back", "02_back.jpg"),
    PhotoRole("mainboard_front", "03_mainboard_front.jpg"),
    PhotoRole("mainboard_back", "04_mainboard_back.jpg"),
    PhotoRole("lcd_board_front", "05_lcd_board_front.jpg"),
    PhotoRole("lcd_board_back", "06_lcd_board_back.jpg"),
    PhotoRole("power_board_front", "07_power_board_front.jpg"),
    PhotoRole("power_board_back", "08_power_board_back.jpg"),
    PhotoRole("jack_board_front", "09_jack_board_front.jpg"),
    PhotoRole("jack_board_back", "10_jack_board_back.jpg"),
)


# ============================================================================
# Console Types
# ============================================================================

LCD_PANEL = BoardSpec(
    "lcd_panel",
    fields=("label",),
    chips=("column_driver", "row_driver"),
)

_HANDHELD_MAINBOARD_FIELDS = ("type", "number_pair", "stamp", "circled_letters")
_SGB_MAINBOARD_FIELDS = ("type", "circled_letters", "letter_at_top_right")

CONSOLES: Dict[str, HardwareDescriptor] = {
    descriptor.id: descriptor
    for descriptor in (
        _descriptor(
            "dmg", "DMG", "Game Boy",
            BoardSpec("metadata", fields=("color",), children=(
                _mainboard(
                    ("type", "extra_label", "stamp", "circled_letters"),
                    ("cpu", "work_ram", "video_ram", "amplifier", "crystal"),
                ),
                BoardSpec(
                    "lcd_board",
                    fields=("type", "circled_letters", "stamp"),
                    chips=("regulator",),
                    children=(LCD_PANEL,),
                ),
                BoardSpec("power_board", fields=("type", "label")),
                BoardSpec("jack_board", fields=("type", "extra_label"), calendar=False),
            )),
            DMG_PHOTOS,
        ),
        _descriptor(
            "sgb", "SGB", "Super Game Boy",
            BoardSpec("metadata", fields=("stamp",), calendar=False, children=(
                _mainboard(
                    _SGB_MAINBOARD_FIELDS,
                    ("cpu", "icd2", "work_ram", "video_ram", "rom", "cic"),
                ),
            )),
            DEFAULT_PHOTOS,
        ),
        _descriptor(
            "mgb", "MGB", "Game Boy Pocket",
            BoardSpec("metadata", fields=("color", "release_code"), children=(
                _mainboard(
                    _HANDHELD_MAINBOARD_FIELDS,
                    ("cpu", "work_ram", "amplifier", "regulator", "crystal"),
                ),
                LCD_PANEL,
            )),
            DEFAULT_PHOTOS,
        ),
        _descriptor(
            "mgl", "MGL", "Game Boy Light",
            BoardSpec("metadata", fields=("color", "release_code"), children=(
                _mainboard(
                    _HANDHELD_MAINBOARD_FIELDS,
                    ("cpu", "work_ram", "amplifier", "regulator", "crystal", "t1"),
                ),
                LCD_PANEL,
            )),
            DEFAULT_PHOTOS,
        ),
        _descriptor(
            "sgb2", "SGB2", "Super Game Boy 2",
            BoardSpec("metadata", fields=("stamp",), calendar=False, children=(
                _mainboard(
                    _SGB_MAINBOARD_FIELDS,
                    ("cpu", "icd2", "work_ram", "rom", "cic", "coil", "crystal"),
                ),
            )),
            DEFAULT_PHOTOS,
        ),
        _descriptor(
            "cgb", "CGB", "Game Boy Color",
            BoardSpec("metadata", fields=("color", "release_code"), children=(
                _mainboard(
                    _HANDHELD_MAINBOARD_FIELDS,
                    ("cpu", "work_ram", "amplifier", "regulator", "crystal"),
                ),
            )),
            DEFAULT_PHOTOS,
        ),
        _descriptor(
            "agb", "AGB", "Game Boy Advance",
            BoardSpec("metadata", fields=("color", "release_code"), children=(
                _mainboard(
                    _HANDHELD_MAINBOARD_FIELDS,
                    ("cpu", "work_ram", "regulator", "amplifier", "u4", "crystal"),
                ),
            )),
            DEFAULT_PHOTOS,
        ),
        _descriptor(
            "ags", "AGS", "Game Boy Advance SP",
            BoardSpec("metadata", fields=("color",), calendar=False, children=(
                _mainboard(
                    _HANDHELD_MAINBOARD_FIELDS,
                    ("cpu", "work_ram", "amplifier", "u4", "u5", "crystal"),
                ),
            )),
            AGS_PHOTOS,
        ),
        _descriptor(
            "gbs", "GBS", "Game Boy Player",
            BoardSpec("metadata", fields=("color", "release_code"), children=(
                _mainboard(
                    ("type", "number_pair", "stamp", "stamp_front", "stamp_back", "circled_letters"),
                    ("cpu", "work_ram", "u4", "u5", "u6", "crystal"),
                ),
            )),
            DEFAULT_PHOTOS,
        ),
        _descriptor(
            "oxy", "OXY", "Game Boy Micro",
            BoardSpec("metadata", fields=("color", "release_code"), calendar=False, children=(
                _mainboard(("type", "circled_letters"), ("cpu", "u2", "u4", "u5")),
            )),
            DEFAULT_PHOTOS,
        ),
    )
}

CONSOLE_TYPES: Tuple[str, ...] = tuple(CONSOLES)

CONSOLE_BY_DIRECTORY: Dict[str, HardwareDescriptor] = {
    descriptor.directory: descriptor for descriptor in CONSOLES.values()
}


# ============================================================================
# Cartridges
# ============================================================================

CARTRIDGE_CHIP_SLOTS = (
    "rom", "rom2", "mapper", "ram", "ram_protector", "flash", "u4", "u5",
    "line_decoder", "eeprom", "accelerometer", "crystal",
)

CARTRIDGE = _descriptor(
    "cartridge", None, "Cartridge",
    BoardSpec("metadata", fields=("code", "stamp"), calendar=False, children=(
        BoardSpec(
            "board",
            fields=("type", "circled_letters", "extra_label"),
            chips=CARTRIDGE_CHIP_SLOTS,
            required=True,
            required_fields=("type",),
        ),
    )),
    DEFAULT_PHOTOS,
)

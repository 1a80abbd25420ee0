"""
Cartridge reference tables.

Hand-curated hardware facts about cartridge boards:
- LAYOUTS: Which chip positions each board layout carries
- MAPPER_KINDS: Exact chip-kind string -> mapper family lookup
- Game table: ROM ID -> display name and candidate layouts, shipped as
  ``gbhwdb/data/games.yaml`` and loaded once
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

ROM_ID_PATTERN = re.compile(r"[A-Z]{3}-[A-Z0-9]{3,4}-[0-9]")

GAMES_PATH = Path(__file__).parent.parent / "data" / "games.yaml"


# ============================================================================
# Board Layouts
# ============================================================================

CartLayoutId = Literal[
    "rom", "rom_mbc", "rom_mbc_ram", "rom_mbc_protect", "rom_mbc_ram_xtal",
    "huc3", "tama", "mbc6", "mbc7", "a15",
]


@dataclass(frozen=True)
class CartChip:
    """A chip position on a cartridge board (e.g. U2 "Mapper" -> mapper)."""
    designator: str
    name: str
    key: str


@dataclass(frozen=True)
class CartLayout:
    chips: Tuple[CartChip, ...]
    battery: bool = False

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(chip.key for chip in self.chips)

    def has_chip(self, key: str) -> bool:
        return key in self.keys


_ROM = CartChip("U1", "ROM", "rom")
_MAPPER = CartChip("U2", "Mapper", "mapper")
_RAM = CartChip("U3", "RAM", "ram")
_CRYSTAL = CartChip("X1", "Crystal", "crystal")

LAYOUTS: Dict[str, CartLayout] = {
    "rom": CartLayout(chips=(_ROM,)),
    "rom_mbc": CartLayout(chips=(_ROM, _MAPPER)),
    "rom_mbc_ram": CartLayout(
        chips=(_ROM, _MAPPER, _RAM, CartChip("U4", "RAM protector", "ram_protector")),
        battery=True,
    ),
    "rom_mbc_protect": CartLayout(
        chips=(_ROM, _MAPPER, CartChip("U3", "RAM protector", "ram_protector")),
        battery=True,
    ),
    "rom_mbc_ram_xtal": CartLayout(
        chips=(
            _ROM, _MAPPER, _RAM,
            CartChip("U4", "RAM protector", "ram_protector"),
            _CRYSTAL,
        ),
        battery=True,
    ),
    "huc3": CartLayout(
        chips=(
            _ROM, _MAPPER, _RAM,
            CartChip("U4", "RAM protector", "ram_protector"),
            CartChip("U5", "????", "u5"),
            _CRYSTAL,
        ),
        battery=True,
    ),
    "tama": CartLayout(
        chips=(
            _ROM, _MAPPER, _RAM,
            CartChip("U4", "????", "u4"),
            CartChip("U5", "RAM protector", "ram_protector"),
            _CRYSTAL,
        ),
        battery=True,
    ),
    "mbc6": CartLayout(
        chips=(
            CartChip("U1", "Mapper", "mapper"),
            CartChip("U2", "ROM", "rom"),
            CartChip("U3", "Flash", "flash"),
            CartChip("U4", "RAM", "ram"),
            CartChip("U5", "RAM protector", "ram_protector"),
        ),
        battery=True,
    ),
    "mbc7": CartLayout(
        chips=(
            _ROM, _MAPPER,
            CartChip("U3", "EEPROM", "eeprom"),
            CartChip("U4", "Accelerometer", "accelerometer"),
        ),
    ),
    "a15": CartLayout(
        chips=(
            _ROM, _MAPPER, _RAM,
            CartChip("U4", "RAM protector", "ram_protector"),
            CartChip("U5", "ROM 2", "rom2"),
            CartChip("U6", "Line Decoder", "line_decoder"),
        ),
        battery=True,
    ),
}


# ============================================================================
# Mappers
# ============================================================================

NO_MAPPER = "no-mapper"
UNCLASSIFIED = "unclassified"

MAPPER_NAMES: Dict[str, str] = {
    NO_MAPPER: "No mapper",
    "mbc1": "MBC1",
    "mbc2": "MBC2",
    "mbc3": "MBC3",
    "mbc30": "MBC30",
    "mbc5": "MBC5",
    "mbc6": "MBC6",
    "mbc7": "MBC7",
    "mmm01": "MMM01",
    "huc1": "HuC-1",
    "huc3": "HuC-3",
    "tama5": "TAMA5",
}

MAPPER_IDS: Tuple[str, ...] = tuple(MAPPER_NAMES)

# Chip kinds as written on the package
MAPPER_KINDS: Dict[str, str] = {
    "MBC1": "mbc1",
    "MBC1A": "mbc1",
    "MBC1B": "mbc1",
    "MBC1B1": "mbc1",
    "MBC2": "mbc2",
    "MBC2A": "mbc2",
    "MBC3": "mbc3",
    "MBC3A": "mbc3",
    "MBC3B": "mbc3",
    "MBC30": "mbc30",
    "MBC5": "mbc5",
    "MBC6": "mbc6",
    "MBC7": "mbc7",
    "MMM01": "mmm01",
    "HuC-1": "huc1",
    "HuC-1A": "huc1",
    "HuC-3": "huc3",
    "TAMA5": "tama5",
}


# ============================================================================
# Games
# ============================================================================


class GameConfig(BaseModel):
    """Reference data for one cartridge ROM ID."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    layouts: List[CartLayoutId] = Field(..., min_length=1)

    @property
    def layout(self) -> CartLayout:
        """First (primary) layout of the game."""
        return LAYOUTS[self.layouts[0]]


_games_adapter = TypeAdapter(Dict[str, GameConfig])
_games: Optional[Dict[str, GameConfig]] = None


def load_games(path: Optional[Path] = None) -> Dict[str, GameConfig]:
    """
    Load the ROM ID -> GameConfig table.

    The packaged table is parsed once per process; passing an explicit path
    always reads that file.

    Args:
        path: Alternative games file (mainly for tests)

    Returns:
        Dictionary keyed by ROM ID

    Raises:
        ValueError: If a key is not a ROM ID
        pydantic.ValidationError: If an entry is malformed
    """
    global _games
    if path is None and _games is not None:
        return _games

    with open(path or GAMES_PATH, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    games = _games_adapter.validate_python(raw)
    for rom_id in games:
        if not ROM_ID_PATTERN.fullmatch(rom_id):
            raise ValueError(f"Invalid ROM ID in game table: {rom_id}")

    if path is None:
        _games = games
    return games


def get_game(rom_id: str) -> Optional[GameConfig]:
    """Look up a game by ROM ID, returning None when unknown."""
    return load_games().get(rom_id)

"""
CSV export of crawled submissions.

One table per console type (``<type>.csv``) plus ``cartridges.csv``. Columns
are generated from the hardware registry, so every field of every board
appears without per-type column lists:

- Submission columns: type, title, slug, url, contributor (cartridges also
  name, the game title)
- Shell fields, then calendar_short/calendar/year/month/week when the shell
  carries a calendar
- Per board (prefix = board key): fields, then calendar columns
- Per chip slot (prefix = slot name): kind, label, manufacturer,
  manufacturer_name, calendar_short, calendar, year, month, week
- Cartridges end with the facts parsed from the mapper and ROM labels
  (prefix = slot name + "_parsed")

Cells follow the display convention: "????" for a field never recorded,
"-" for an explicit null. When the enclosing object (a board or a chip) is
absent altogether, its cells are left empty.
"""

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Sequence

from gbhwdb import format
from gbhwdb.classification import group_by_type, parse_chip_label
from gbhwdb.logging_config import get_logger
from gbhwdb.schemas import MISSING, field_value
from gbhwdb.schemas.registry import CARTRIDGE, CONSOLES, BoardSpec, HardwareDescriptor
from gbhwdb.submission import CartridgeSubmission, Submission

logger = get_logger("export")

SITE_URL = "https://gbhwdb.gekkio.fi"
CARTRIDGES_CSV = "cartridges.csv"


@dataclass(frozen=True)
class CsvColumn:
    """A named column and the accessor producing its cell text."""
    name: str
    get: Callable[[Any], str]


# ============================================================================
# Column Builders
# ============================================================================


def _name(prefix: str, key: str) -> str:
    return f"{prefix}_{key}" if prefix else key


def field(prefix: str, key: str) -> CsvColumn:
    """Column showing a model field with the optional-value convention."""
    return CsvColumn(_name(prefix, key), lambda model: format.optional(field_value(model, key)))


def generate(prefix: str, name: str, get: Callable[[Any], Any]) -> CsvColumn:
    """Column computed from the row; None renders as "-", MISSING as "????"."""
    return CsvColumn(_name(prefix, name), lambda value: format.optional(get(value)))


def lift(get: Callable[[Any], Any], columns: Sequence[CsvColumn]) -> List[CsvColumn]:
    """
    Re-root columns onto a nested object.

    Args:
        get: Accessor from the outer row to the nested object
        columns: Columns over the nested object

    Returns:
        Columns over the outer row; cells are empty when the nested object is
        absent (None or MISSING)
    """
    def lifted(column: CsvColumn) -> CsvColumn:
        def cell(row: Any) -> str:
            value = get(row)
            if value is None or value is MISSING:
                return ""
            return column.get(value)
        return CsvColumn(column.name, cell)

    return [lifted(column) for column in columns]


def calendar_columns(prefix: str) -> List[CsvColumn]:
    return [
        generate(prefix, "calendar_short", format.calendar_short),
        generate(prefix, "calendar", format.calendar),
        field(prefix, "year"),
        field(prefix, "month"),
        field(prefix, "week"),
    ]


def chip_columns(prefix: str) -> List[CsvColumn]:
    return [
        field(prefix, "kind"),
        field(prefix, "label"),
        field(prefix, "manufacturer"),
        CsvColumn(
            _name(prefix, "manufacturer_name"),
            lambda chip: format.optional(
                field_value(chip, "manufacturer"), format.manufacturer_name
            ),
        ),
        *calendar_columns(prefix),
    ]


def _child(key: str) -> Callable[[Any], Any]:
    return lambda model: field_value(model, key)


def board_columns(spec: BoardSpec, prefix: str) -> List[CsvColumn]:
    """
    Columns for one board and everything nested in it.

    Args:
        spec: Board specification
        prefix: Column prefix ("" for the top-level shell)
    """
    columns = [field(prefix, name) for name in spec.fields]
    if spec.calendar:
        columns.extend(calendar_columns(prefix))
    for slot in spec.chips:
        columns.extend(lift(_child(slot), chip_columns(slot)))
    for child in spec.children:
        columns.extend(lift(_child(child.key), board_columns(child, child.key)))
    return columns


PARSED_FIELDS = (
    ("kind", lambda parsed: parsed.kind),
    ("manufacturer", lambda parsed: parsed.manufacturer),
    ("manufacturer_name", lambda parsed: (
        format.manufacturer_name(parsed.manufacturer) if parsed.manufacturer else None
    )),
    ("calendar_short", format.calendar_short),
    ("year", lambda parsed: parsed.year),
    ("week", lambda parsed: parsed.week),
)


def parsed_label_columns(slot: str, rom_id: bool = False) -> List[CsvColumn]:
    """
    Columns for the facts parsed from a cartridge chip label.

    Cells are empty when the chip is absent and "????" when its label is
    missing or unrecognized.
    """
    fields = PARSED_FIELDS
    if rom_id:
        fields = (("rom_id", lambda parsed: parsed.rom_id),) + fields

    def column(key: str, get: Callable[[Any], Any]) -> CsvColumn:
        def cell(cartridge: CartridgeSubmission) -> str:
            chip = field_value(field_value(cartridge.metadata, "board"), slot)
            if chip is None or chip is MISSING:
                return ""
            parsed = parse_chip_label(cartridge, slot)
            return format.optional(MISSING if parsed is None else get(parsed))
        return CsvColumn(f"{slot}_parsed_{key}", cell)

    return [column(key, get) for key, get in fields]


def columns_for(descriptor: HardwareDescriptor) -> List[CsvColumn]:
    """Full column list of a hardware type's table."""
    kind = "cartridges" if descriptor is CARTRIDGE else "consoles"

    def url(submission: Submission) -> str:
        return f"{SITE_URL}/{kind}/{submission.type}/{submission.slug}.html"

    columns = [generate("", "type", lambda s: s.type)]
    if descriptor is CARTRIDGE:
        columns.append(generate("", "name", lambda s: s.game.name if s.game else ""))
    columns.extend([
        generate("", "title", lambda s: s.title),
        generate("", "slug", lambda s: s.slug),
        generate("", "url", url),
        generate("", "contributor", lambda s: s.contributor),
    ])
    columns.extend(lift(lambda s: s.metadata, board_columns(descriptor.shell, "")))
    if descriptor is CARTRIDGE:
        columns.extend(parsed_label_columns("mapper"))
        columns.extend(parsed_label_columns("rom", rom_id=True))
    return columns


# ============================================================================
# Writing
# ============================================================================


def write_csv(columns: Sequence[CsvColumn], rows: Iterable[Any], path: Path) -> int:
    """
    Write rows as CSV with a header line.

    Returns:
        Number of data rows written
    """
    count = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([column.name for column in columns])
        for row in rows:
            writer.writerow([column.get(row) for column in columns])
            count += 1
    return count


def export_csvs(
    consoles: Iterable[Submission],
    cartridges: Iterable[CartridgeSubmission],
    out_dir: Path,
) -> Dict[str, Path]:
    """
    Write every console table and the cartridge table.

    A table is written for every console type, even when it has no rows.

    Args:
        consoles: Console submissions
        cartridges: Cartridge submissions
        out_dir: Output directory (created if needed)

    Returns:
        Dictionary of table name -> written path
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    by_type = group_by_type(consoles)
    written = {}

    for type_id, descriptor in CONSOLES.items():
        path = out_dir / f"{type_id}.csv"
        count = write_csv(columns_for(descriptor), by_type.get(type_id, []), path)
        logger.debug(f"Wrote {count} rows to {path}")
        written[type_id] = path

    path = out_dir / CARTRIDGES_CSV
    rows = [s for group in group_by_type(cartridges).values() for s in group]
    count = write_csv(columns_for(CARTRIDGE), rows, path)
    logger.debug(f"Wrote {count} rows to {path}")
    written["cartridges"] = path

    logger.info(f"Exported {len(written)} CSV tables to {out_dir}")
    return written

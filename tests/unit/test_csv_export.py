"""
Unit tests for the CSV export.

Tests generated column lists, cell conventions and written tables.
"""

import csv

from gbhwdb.crawler import crawl
from gbhwdb.csv_export import (
    CsvColumn,
    chip_columns,
    columns_for,
    export_csvs,
    lift,
    write_csv,
)
from gbhwdb.schemas import Chip
from gbhwdb.schemas.registry import CARTRIDGE, CONSOLES


def read_rows(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


class TestColumns:
    """Tests for column generation."""

    def test_console_submission_columns(self):
        names = [c.name for c in columns_for(CONSOLES["cgb"])]

        assert names[:5] == ["type", "title", "slug", "url", "contributor"]
        assert names[5:12] == [
            "color", "release_code",
            "calendar_short", "calendar", "year", "month", "week",
        ]
        assert "mainboard_type" in names
        assert "mainboard_calendar_short" in names
        assert "cpu_manufacturer_name" in names
        assert "crystal_week" in names

    def test_cartridge_columns(self):
        names = [c.name for c in columns_for(CARTRIDGE)]

        assert names[:6] == ["type", "name", "title", "slug", "url", "contributor"]
        assert names[6:8] == ["code", "stamp"]
        assert "board_type" in names
        assert "mapper_kind" in names
        assert "line_decoder_calendar" in names
        assert names[-13:] == [
            "mapper_parsed_kind", "mapper_parsed_manufacturer",
            "mapper_parsed_manufacturer_name", "mapper_parsed_calendar_short",
            "mapper_parsed_year", "mapper_parsed_week",
            "rom_parsed_rom_id", "rom_parsed_kind", "rom_parsed_manufacturer",
            "rom_parsed_manufacturer_name", "rom_parsed_calendar_short",
            "rom_parsed_year", "rom_parsed_week",
        ]

    def test_dmg_nested_columns(self):
        names = [c.name for c in columns_for(CONSOLES["dmg"])]

        assert "lcd_board_type" in names
        assert "regulator_kind" in names
        assert "lcd_panel_label" in names
        assert "column_driver_label" in names
        assert "jack_board_extra_label" in names
        assert "jack_board_calendar" not in names

    def test_column_names_unique(self):
        for descriptor in [*CONSOLES.values(), CARTRIDGE]:
            names = [c.name for c in columns_for(descriptor)]
            assert len(names) == len(set(names)), descriptor.id

    def test_chip_cells(self):
        """Test the unknown / verified absent / value convention."""
        columns = {c.name: c for c in chip_columns("cpu")}
        chip = Chip.model_validate({
            "kind": "CPU CGB", "label": None, "manufacturer": "sharp", "year": 1998, "week": 12,
        })

        assert columns["cpu_kind"].get(chip) == "CPU CGB"
        assert columns["cpu_label"].get(chip) == "-"
        assert columns["cpu_manufacturer"].get(chip) == "sharp"
        assert columns["cpu_manufacturer_name"].get(chip) == "Sharp"
        assert columns["cpu_calendar_short"].get(chip) == "12/1998"
        assert columns["cpu_calendar"].get(chip) == "Week 12/1998"
        assert columns["cpu_month"].get(chip) == "????"

    def test_lift_absent_parent_is_empty(self):
        columns = lift(lambda row: row.get("chip"), chip_columns("cpu"))

        assert all(c.get({"chip": None}) == "" for c in columns)


class TestWriting:
    """Tests for written tables."""

    def test_write_csv(self, tmp_path):
        path = tmp_path / "out.csv"
        columns = [CsvColumn("a", lambda r: r[0]), CsvColumn("b", lambda r: r[1])]

        count = write_csv(columns, [("1", "x,y"), ("2", "z")], path)

        assert count == 2
        assert read_rows(path) == [{"a": "1", "b": "x,y"}, {"a": "2", "b": "z"}]

    def test_export_csvs(self, populated_root, tmp_path):
        result = crawl(populated_root)
        out_dir = tmp_path / "csv"

        written = export_csvs(result.consoles, result.cartridges, out_dir)

        assert set(written) == set(CONSOLES) | {"cartridges"}
        assert read_rows(out_dir / "agb.csv") == []

        sgb = read_rows(out_dir / "sgb.csv")
        assert [row["slug"] for row in sgb] == ["bob-7", "carol-7"]
        assert sgb[0]["title"] == "Unit #7"
        assert sgb[0]["url"] == "https://gbhwdb.gekkio.fi/consoles/sgb/bob-7.html"
        assert sgb[0]["stamp"] == "????"
        assert sgb[0]["mainboard_type"] == "SGB-CPU-01"
        assert sgb[0]["cpu_kind"] == ""

        cartridges = read_rows(out_dir / "cartridges.csv")
        assert len(cartridges) == 1
        row = cartridges[0]
        assert row["type"] == "DMG-AAUJ-1"
        assert row["name"] == "Pocket Monsters Kin (Japan) (Rev A) (SGB Enhanced)"
        assert row["url"] == "https://gbhwdb.gekkio.fi/cartridges/DMG-AAUJ-1/bob-3.html"
        assert row["mapper_kind"] == "MBC3A"
        assert row["mapper_label"] == "????"
        assert row["rom_kind"] == ""
        assert row["mapper_parsed_kind"] == "????"
        assert row["rom_parsed_rom_id"] == ""

    def test_parsed_label_cells(self, data_root, make_unit, tmp_path):
        make_unit("alice", "DMG-AAUJ-1", "1", {"board": {
            "type": "DMG-A15-01",
            "year": 1998,
            "mapper": {"label": "MBC3 BU3631K 802 127"},
            "rom": {"label": "DMG-AAUJ-1 S LH5359B1 JAPAN B1 9612 D"},
        }})
        result = crawl(data_root)

        export_csvs(result.consoles, result.cartridges, tmp_path / "csv")

        row = read_rows(tmp_path / "csv" / "cartridges.csv")[0]
        assert row["mapper_kind"] == "????"
        assert row["mapper_parsed_kind"] == "MBC3"
        assert row["mapper_parsed_manufacturer_name"] == "ROHM"
        assert row["mapper_parsed_calendar_short"] == "2/1998"
        assert row["mapper_parsed_year"] == "1998"
        assert row["rom_parsed_rom_id"] == "DMG-AAUJ-1"
        assert row["rom_parsed_kind"] == "LH53259"
        assert row["rom_parsed_manufacturer"] == "sharp"
        assert row["rom_parsed_calendar_short"] == "12/1996"

    def test_unparsed_label_cells(self, data_root, make_unit, tmp_path):
        make_unit("alice", "DMG-AAUJ-1", "1", {"board": {
            "type": "DMG-A15-01",
            "mapper": {"label": "MBC3 A"},
        }})
        result = crawl(data_root)

        export_csvs(result.consoles, result.cartridges, tmp_path / "csv")

        row = read_rows(tmp_path / "csv" / "cartridges.csv")[0]
        assert row["mapper_parsed_kind"] == "????"
        assert row["mapper_parsed_week"] == "????"

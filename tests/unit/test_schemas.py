"""
Unit tests for the metadata schemas and hardware registry.

Tests generated model shapes, range validation, unknown-key rejection,
the omitted/null distinction and the cartridge reference tables.
"""

import pytest
from pydantic import ValidationError

from gbhwdb.schemas import MISSING, Chip, field_value
from gbhwdb.schemas.cartridge import (
    LAYOUTS,
    MAPPER_IDS,
    MAPPER_KINDS,
    GameConfig,
    get_game,
    load_games,
)
from gbhwdb.schemas.registry import (
    CARTRIDGE,
    CONSOLE_BY_DIRECTORY,
    CONSOLE_TYPES,
    CONSOLES,
    BoardSpec,
    build_model,
)


class TestRegistry:
    """Tests for the console and cartridge descriptors."""

    def test_console_types_in_registry_order(self):
        """Test that all ten console types are registered."""
        assert CONSOLE_TYPES == (
            "dmg", "sgb", "mgb", "mgl", "sgb2", "cgb", "agb", "ags", "gbs", "oxy",
        )

    def test_directory_names_are_uppercase_ids(self):
        """Test that type directories map back to descriptors."""
        for type_id, descriptor in CONSOLES.items():
            assert descriptor.directory == type_id.upper()
            assert CONSOLE_BY_DIRECTORY[descriptor.directory] is descriptor

    def test_generated_model_names(self):
        """Test that generated models are named after the type."""
        assert CONSOLES["dmg"].model.__name__ == "DmgMetadata"
        assert CARTRIDGE.model.__name__ == "CartridgeMetadata"

    def test_photo_roles(self):
        """Test photo role sets per hardware type."""
        assert CONSOLES["cgb"].photo_keys == ("front", "back", "pcb_front", "pcb_back")
        assert CONSOLES["ags"].photo_keys == ("front", "top", "back", "pcb_front", "pcb_back")
        assert len(CONSOLES["dmg"].photos) == 10
        assert CONSOLES["dmg"].photos[-1].filename == "10_jack_board_back.jpg"
        assert CARTRIDGE.photos[0].filename == "01_front.jpg"

    def test_build_model_without_calendar(self):
        """Test that calendar fields are only present when requested."""
        model = build_model(BoardSpec("metadata", fields=("color",), calendar=False), "Test")

        assert "color" in model.model_fields
        assert "year" not in model.model_fields


class TestConsoleValidation:
    """Tests for console metadata validation."""

    def test_minimal_document(self, metadata_factory):
        """Test that a mainboard type alone is a valid document."""
        for type_id, descriptor in CONSOLES.items():
            metadata = descriptor.model.model_validate(metadata_factory(type_id))
            assert metadata.mainboard.type

    def test_mainboard_required(self):
        """Test that documents without a mainboard are rejected."""
        with pytest.raises(ValidationError):
            CONSOLES["cgb"].model.model_validate({"color": "purple"})

    def test_mainboard_type_required(self):
        """Test that the mainboard type is mandatory."""
        with pytest.raises(ValidationError):
            CONSOLES["cgb"].model.model_validate({"mainboard": {"stamp": "0123"}})

    def test_unknown_keys_rejected(self):
        """Test that unknown keys are rejected at every level."""
        model = CONSOLES["dmg"].model
        with pytest.raises(ValidationError):
            model.model_validate({"mainboard": {"type": "DMG-CPU-01"}, "colour": "gray"})
        with pytest.raises(ValidationError):
            model.model_validate({"mainboard": {"type": "DMG-CPU-01", "cpu": {"vendor": "x"}}})

    @pytest.mark.parametrize("year", [1988, 1998, 2010])
    def test_year_in_range(self, year):
        """Test that years inside the manufacturing era validate."""
        metadata = CONSOLES["cgb"].model.model_validate(
            {"mainboard": {"type": "CGB-CPU-01"}, "year": year}
        )
        assert metadata.year == year

    @pytest.mark.parametrize("calendar", [
        {"year": 1800},
        {"year": 2011},
        {"month": 0},
        {"month": 13},
        {"week": 54},
    ])
    def test_calendar_out_of_range(self, calendar):
        """Test that out-of-range calendar values are rejected."""
        with pytest.raises(ValidationError):
            CONSOLES["cgb"].model.model_validate(
                {"mainboard": {"type": "CGB-CPU-01", **calendar}}
            )

    def test_numeric_string_coerced(self):
        """Test lax-mode coercion of numeric strings."""
        metadata = CONSOLES["cgb"].model.model_validate(
            {"mainboard": {"type": "CGB-CPU-01", "cpu": {"year": "1999", "week": "12"}}}
        )
        assert metadata.mainboard.cpu.year == 1999
        assert metadata.mainboard.cpu.week == 12

    def test_ags_shell_has_no_calendar(self):
        """Test that the AGS shell does not accept calendar fields."""
        with pytest.raises(ValidationError):
            CONSOLES["ags"].model.model_validate(
                {"mainboard": {"type": "C/AGS-CPU-01"}, "year": 2003}
            )

    def test_dmg_sub_boards(self):
        """Test the nested DMG boards and LCD panel."""
        metadata = CONSOLES["dmg"].model.model_validate({
            "mainboard": {"type": "DMG-CPU-06"},
            "lcd_board": {
                "type": "DMG-LCD-06",
                "regulator": {"kind": "IR3E02"},
                "lcd_panel": {"label": "Y0", "column_driver": {"label": "S6B0086"}},
            },
            "jack_board": {"type": "DMG-JACK-01"},
        })
        assert metadata.lcd_board.lcd_panel.column_driver.label == "S6B0086"
        assert metadata.power_board is None

    def test_models_are_frozen(self, metadata_factory):
        """Test that validated models cannot be modified."""
        metadata = CONSOLES["sgb"].model.model_validate(metadata_factory("sgb"))
        with pytest.raises(ValidationError):
            metadata.stamp = "changed"


class TestChip:
    """Tests for the shared Chip schema."""

    def test_unknown_manufacturer_rejected(self):
        with pytest.raises(ValidationError):
            Chip.model_validate({"manufacturer": "acme"})

    def test_outlier_defaults_to_false(self):
        assert Chip.model_validate({}).outlier is False

    def test_date_range(self):
        """Test that a date range is a pair of month/part endpoints."""
        chip = Chip.model_validate({"year": 1998, "date_range": [{"month": 1}, {"month": 3}]})
        assert chip.date_range[0].month == 1
        assert chip.date_range[1].month == 3

    def test_field_value_distinguishes_null_from_omitted(self):
        """Test that explicit nulls and omitted fields stay distinct."""
        chip = Chip.model_validate({"label": None, "kind": "LR35902"})

        assert field_value(chip, "label") is None
        assert field_value(chip, "manufacturer") is MISSING
        assert field_value(chip, "kind") == "LR35902"
        assert field_value(None, "kind") is MISSING
        assert field_value(MISSING, "kind") is MISSING


class TestCartridgeTables:
    """Tests for layouts, mapper tables and the game table."""

    def test_cartridge_board_required(self):
        with pytest.raises(ValidationError):
            CARTRIDGE.model.model_validate({"code": "A"})

    def test_layouts(self):
        """Test a few hand-curated layout facts."""
        assert not LAYOUTS["rom"].has_chip("mapper")
        assert LAYOUTS["mbc6"].chips[0].designator == "U1"
        assert LAYOUTS["mbc6"].chips[0].key == "mapper"
        assert LAYOUTS["mbc7"].battery is False
        assert LAYOUTS["rom_mbc_ram_xtal"].has_chip("crystal")

    def test_mapper_kinds_map_to_known_ids(self):
        assert set(MAPPER_KINDS.values()) <= set(MAPPER_IDS)
        assert MAPPER_KINDS["MBC1B1"] == "mbc1"
        assert MAPPER_KINDS["HuC-1A"] == "huc1"

    def test_packaged_games(self):
        """Test that the packaged game table loads and is cached."""
        games = load_games()

        assert games is load_games()
        assert get_game("DMG-AAUJ-1").layouts == ["rom_mbc_ram_xtal"]
        assert get_game("DMG-ZZZZ-9") is None
        for game in games.values():
            for layout in game.layouts:
                assert layout in LAYOUTS

    def test_custom_games_file(self, tmp_path):
        path = tmp_path / "games.yaml"
        path.write_text('DMG-TEST-0:\n  name: "Test"\n  layouts: [rom]\n')

        games = load_games(path)

        assert games == {"DMG-TEST-0": GameConfig(name="Test", layouts=["rom"])}

    def test_invalid_rom_id_in_games_file(self, tmp_path):
        path = tmp_path / "games.yaml"
        path.write_text('not-a-rom-id:\n  name: "Test"\n  layouts: [rom]\n')

        with pytest.raises(ValueError):
            load_games(path)

    def test_rom_id_with_trailing_newline_rejected(self, tmp_path):
        path = tmp_path / "games.yaml"
        path.write_text('"DMG-TEST-0\\n":\n  name: "Test"\n  layouts: [rom]\n')

        with pytest.raises(ValueError):
            load_games(path)

    def test_unknown_layout_in_games_file(self, tmp_path):
        path = tmp_path / "games.yaml"
        path.write_text('DMG-TEST-0:\n  name: "Test"\n  layouts: [cassette]\n')

        with pytest.raises(ValidationError):
            load_games(path)

"""
Unit tests for the build run.

Tests the full crawl / export / photo pipeline on a small submission tree.
"""

import csv
import json

import pytest

from gbhwdb.builder import build, export_data
from gbhwdb.crawler import crawl
from gbhwdb.exceptions import ConfigValidationError, MalformedUnitNameError
from gbhwdb.schemas.registry import CONSOLES


class TestExportData:
    """Tests for the JSON data export."""

    def test_one_file_per_type(self, populated_root, tmp_path):
        written = export_data(crawl(populated_root), tmp_path / "data")

        assert set(written) == set(CONSOLES) | {"cartridges"}
        assert json.loads((tmp_path / "data" / "agb.json").read_text()) == []

    def test_serialized_submission(self, populated_root, tmp_path):
        export_data(crawl(populated_root), tmp_path / "data")

        dmg = json.loads((tmp_path / "data" / "dmg.json").read_text())
        assert len(dmg) == 1
        entry = dmg[0]
        assert entry["type"] == "dmg"
        assert entry["title"] == "DMG-ABCD-0"
        assert entry["slug"] == "DMG-ABCD-0"
        assert entry["sort_group"] == "DMG"
        assert entry["contributor"] == "alice"
        assert entry["metadata"] == {"mainboard": {"type": "DMG-CPU-01"}}
        assert set(entry["photos"]) == set(CONSOLES["dmg"].photo_keys)
        assert all(photo is None for photo in entry["photos"].values())

    def test_explicit_null_kept(self, data_root, make_unit, tmp_path):
        make_unit("alice", "SGB", "1", {
            "mainboard": {"type": "SGB-CPU-01", "cpu": {"label": None}},
            "stamp": None,
        })

        export_data(crawl(data_root), tmp_path / "data")

        entry = json.loads((tmp_path / "data" / "sgb.json").read_text())[0]
        assert entry["metadata"] == {
            "mainboard": {"type": "SGB-CPU-01", "cpu": {"label": None}},
            "stamp": None,
        }

    def test_cartridge_game_name(self, populated_root, tmp_path):
        export_data(crawl(populated_root), tmp_path / "data")

        cartridges = json.loads((tmp_path / "data" / "cartridges.json").read_text())
        assert [c["type"] for c in cartridges] == ["DMG-AAUJ-1"]
        assert cartridges[0]["game"] == "Pocket Monsters Kin (Japan) (Rev A) (SGB Enhanced)"


class TestBuild:
    """Tests for build()."""

    def test_full_build(self, populated_root, pipeline_config, tmp_path):
        summary = build(pipeline_config, init=False)
        build_dir = tmp_path / "build"

        assert len(summary.result.consoles) == 4
        assert len(summary.result.cartridges) == 1
        assert [s.path.name for s in summary.result.skipped] == ["5"]

        assert (build_dir / "data" / "sgb.json").exists()
        with open(build_dir / "csv" / "sgb.csv", newline="", encoding="utf-8") as f:
            assert [row["slug"] for row in csv.DictReader(f)] == ["bob-7", "carol-7"]

        static = build_dir / "static" / "cgb"
        assert (static / "C12345678_01_front.jpg").exists()
        assert (static / "C12345678_thumbnail_80.jpg").exists()
        assert (static / "C12345678_thumbnail_50.jpg").exists()
        assert summary.photos.copied == 1
        assert summary.photos.thumbnails == 2

    def test_rebuild_is_incremental(self, populated_root, pipeline_config):
        build(pipeline_config, init=False)
        summary = build(pipeline_config, init=False)

        assert summary.photos.copied == 0
        assert summary.photos.thumbnails == 0

    def test_invalid_config_fails_before_crawl(self, populated_root, pipeline_config, tmp_path):
        pipeline_config.photo_workers = 0

        with pytest.raises(ConfigValidationError):
            build(pipeline_config, init=False)

        assert not (tmp_path / "build").exists()

    def test_malformed_unit_name_aborts(self, data_root, make_unit, metadata_factory,
                                        pipeline_config):
        make_unit("alice", "DMG", "not a serial", metadata_factory("dmg"))

        with pytest.raises(MalformedUnitNameError):
            build(pipeline_config, init=False)

    def test_cartridge_without_mapper_chip(self, data_root, make_unit, pipeline_config):
        """Test that a cartridge with no mapper entry builds and groups as unknown."""
        make_unit("alice", "DMG-AAUJ-1", "1", {"board": {"type": "DMG-A15-01"}})
        make_unit("alice", "DMG-ZZZZ-0", "2", {"board": {"type": "DMG-A02-01"}})

        summary = build(pipeline_config, init=False)

        assert [c.slug for c in summary.result.cartridges] == ["alice-1", "alice-2"]
        with open(summary.csv_files["cartridges"], newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert [row["mapper_kind"] for row in rows] == ["", ""]

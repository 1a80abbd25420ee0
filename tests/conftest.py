"""
Pytest configuration and fixtures for gbhwdb tests.

Provides builders for temporary submission trees (contributor / type / unit
directories with metadata.json and photo files) and an isolated pipeline
configuration.
"""

import io
import json
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

import pytest
from PIL import Image

from gbhwdb.config import GbhwdbConfig


# ============================================================================
# Environment Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove GBHWDB_* variables so tests never see the caller's settings."""
    for name in (
        "GBHWDB_CONFIG_PATH",
        "GBHWDB_DATA_DIR",
        "GBHWDB_BUILD_DIR",
        "GBHWDB_LOG_LEVEL",
        "GBHWDB_LOG_DIR",
        "GBHWDB_ENV",
    ):
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# Metadata Fixtures
# ============================================================================


def minimal_metadata(type_id: str) -> dict:
    """Smallest valid metadata document for a hardware type."""
    if type_id == "cartridge":
        return {"board": {"type": "DMG-BEAN-02"}}
    return {"mainboard": {"type": f"{type_id.upper()}-CPU-01"}}


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A small 160x120 JPEG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (160, 120), (200, 40, 40)).save(buffer, "JPEG")
    return buffer.getvalue()


# ============================================================================
# Submission Tree Fixtures
# ============================================================================


@pytest.fixture
def data_root(tmp_path) -> Path:
    root = tmp_path / "data"
    root.mkdir()
    return root


@pytest.fixture
def make_unit(data_root: Path, jpeg_bytes: bytes) -> Callable[..., Path]:
    """
    Factory creating one unit directory.

    Args (of the returned callable):
        contributor: Contributor directory name
        type_dir: Type directory name ("DMG", "CGB-BXTJ-0", ...)
        unit: Unit directory name
        metadata: Document to write as metadata.json; a raw string is
            written verbatim; None writes no metadata file
        photos: Photo filenames to create as JPEG files

    Returns:
        Path to the unit directory
    """
    def _make_unit(
        contributor: str,
        type_dir: str,
        unit: str,
        metadata: Optional[object] = None,
        photos: Iterable[str] = (),
    ) -> Path:
        unit_dir = data_root / contributor / type_dir / unit
        unit_dir.mkdir(parents=True)
        if isinstance(metadata, str):
            (unit_dir / "metadata.json").write_text(metadata)
        elif metadata is not None:
            (unit_dir / "metadata.json").write_text(json.dumps(metadata))
        for name in photos:
            (unit_dir / name).write_bytes(jpeg_bytes)
        return unit_dir

    return _make_unit


@pytest.fixture
def populated_root(data_root: Path, make_unit) -> Path:
    """
    A small mixed tree:

    alice/DMG/DMG-ABCD-0   valid, no photos
    alice/CGB/C12345678    valid, front photo
    bob/SGB/7              valid
    carol/SGB/7            valid (same unit number, other contributor)
    bob/DMG-AAUJ-1/3       cartridge of a known game
    carol/MGB/5            invalid (year out of range)
    """
    make_unit("alice", "DMG", "DMG-ABCD-0", minimal_metadata("dmg"))
    make_unit("alice", "CGB", "C12345678", minimal_metadata("cgb"), photos=["01_front.jpg"])
    make_unit("bob", "SGB", "7", minimal_metadata("sgb"))
    make_unit("carol", "SGB", "7", minimal_metadata("sgb"))
    make_unit("bob", "DMG-AAUJ-1", "3", {
        "board": {"type": "DMG-A15-01", "mapper": {"kind": "MBC3A"}},
    })
    make_unit("carol", "MGB", "5", {
        "mainboard": {"type": "MGB-CPU-01"},
        "year": 1800,
    })
    return data_root


@pytest.fixture
def pipeline_config(tmp_path: Path, data_root: Path) -> GbhwdbConfig:
    """Configuration rooted in temporary directories."""
    config = GbhwdbConfig(config_dir=tmp_path / "config")
    config.data_dir = data_root
    config.build_dir = tmp_path / "build"
    config.crawl_workers = 4
    config.photo_workers = 2
    return config


@pytest.fixture
def metadata_factory() -> Callable[[str], Dict]:
    return minimal_metadata

"""
Filesystem walker for the submission tree.

Enumerates the three-level hierarchy
``<root>/<contributor>/<TYPE_DIR>/<unit>/`` and resolves per-unit photo files
against the fixed filenames of a hardware type, attaching stat snapshots
that downstream photo processing uses for change detection.

Only directories are listed; stray regular files at any level are ignored.
Listings are sorted by name, but output ordering is imposed separately by
the classification step.
"""

import os
from concurrent.futures import Executor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from gbhwdb.schemas.registry import PhotoRole


@dataclass(frozen=True)
class FileStats:
    """
    Filesystem stat snapshot.

    Attributes:
        mtime: Modification time in seconds since the epoch
        size: File size in bytes
    """
    mtime: float
    size: int

    @classmethod
    def from_stat(cls, stat: os.stat_result) -> "FileStats":
        return cls(mtime=stat.st_mtime, size=stat.st_size)


@dataclass(frozen=True)
class FsEntry:
    """A listed directory entry."""
    path: Path
    name: str
    stats: FileStats


@dataclass(frozen=True)
class UnitPath:
    """One ``contributor / type directory / unit directory`` triple."""
    contributor: FsEntry
    type_dir: FsEntry
    unit: FsEntry


@dataclass(frozen=True)
class Photo:
    """
    A photo file that exists on disk.

    Attributes:
        path: Absolute path to the photo
        name: Fixed filename for the role (e.g. "01_front.jpg")
        stats: Stat snapshot taken during the crawl
    """
    path: Path
    name: str
    stats: FileStats

    def to_dict(self) -> Dict[str, object]:
        return {
            "path": str(self.path),
            "name": self.name,
            "mtime": self.stats.mtime,
            "size": self.stats.size,
        }


def list_directories(base: Union[str, Path]) -> List[FsEntry]:
    """
    List the subdirectories of a directory.

    Args:
        base: Directory to list

    Returns:
        FsEntry for every directory entry, sorted by name

    Raises:
        FileNotFoundError: If base does not exist
        OSError: For any other listing or stat failure
    """
    entries = []
    with os.scandir(base) as it:
        for entry in it:
            if not entry.is_dir():
                continue
            entries.append(FsEntry(
                path=Path(entry.path).absolute(),
                name=entry.name,
                stats=FileStats.from_stat(entry.stat()),
            ))
    entries.sort(key=lambda e: e.name)
    return entries


def _contributor_units(contributor: FsEntry) -> List[UnitPath]:
    units = []
    for type_dir in list_directories(contributor.path):
        for unit in list_directories(type_dir.path):
            units.append(UnitPath(contributor, type_dir, unit))
    return units


def walk_units(root: Union[str, Path], executor: Optional[Executor] = None) -> List[UnitPath]:
    """
    Enumerate every unit directory under the data root.

    Args:
        root: Data root containing one directory per contributor
        executor: Optional executor; contributors are then listed in parallel

    Returns:
        List of UnitPath triples in (contributor, type, unit) name order
    """
    contributors = list_directories(root)
    if executor is None:
        listings = map(_contributor_units, contributors)
    else:
        listings = executor.map(_contributor_units, contributors)
    return [unit for units in listings for unit in units]


def resolve_photo(unit_dir: Path, filename: str) -> Optional[Photo]:
    """
    Stat one expected photo file.

    Returns:
        Photo if the file exists, None if it does not

    Raises:
        OSError: Any stat failure other than the file not existing
    """
    path = Path(unit_dir) / filename
    try:
        stat = path.stat()
    except FileNotFoundError:
        return None
    return Photo(path=path.absolute(), name=filename, stats=FileStats.from_stat(stat))


def resolve_photos(unit_dir: Path, roles: Iterable[PhotoRole]) -> Dict[str, Optional[Photo]]:
    """
    Resolve every photo role of a hardware type for one unit.

    Args:
        unit_dir: Unit directory
        roles: Photo roles of the unit's hardware type

    Returns:
        Mapping of role key to Photo, or None for absent files
    """
    return {role.key: resolve_photo(unit_dir, role.filename) for role in roles}

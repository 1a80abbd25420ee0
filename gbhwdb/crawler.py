"""
Submission crawler.

Walks ``<root>/<contributor>/<TYPE_DIR>/<unit>/``, validates every unit's
metadata against its hardware type and assembles immutable submission
records.

Key Concepts:
- Identity: A unit directory name is either an official serial
  (``DMG-ABCD-0``, ``C12345678``) or a plain unit number (``7``, ``7-1``).
  Serials are used verbatim as title and slug, and their leading letters
  form the sort group. Numbers get a ``Unit #<n>`` title and a slug that
  includes the contributor, since numbers collide across contributors.
  Any other name is a data-entry defect and raises MalformedUnitNameError.
  Two units of one type that end up with the same slug (``a-1/CGB/2`` and
  ``a/CGB/1-2``) raise DuplicateSlugError.
- Failure policy: Units with missing or invalid metadata, and units under an
  unknown type directory, are logged and recorded as skipped. Malformed unit
  names abort the crawl unless ``strict_unit_names`` is disabled. Filesystem
  errors always propagate.
- Concurrency: Directory listing and per-unit work (metadata read,
  validation, photo stat) run on a thread pool; sorting happens afterwards.
"""

import re
import unicodedata
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Optional, Tuple, Union

from gbhwdb.classification import submission_sort_key
from gbhwdb.config import DEFAULT_CRAWL_WORKERS, GbhwdbConfig
from gbhwdb.exceptions import (
    DuplicateSlugError,
    MalformedUnitNameError,
    MetadataValidationError,
    MissingMetadataError,
    UnknownHardwareTypeError,
)
from gbhwdb.logging_config import get_logger
from gbhwdb.metadata import read_metadata, require_hardware
from gbhwdb.schemas.cartridge import get_game
from gbhwdb.schemas.registry import CARTRIDGE, HardwareDescriptor
from gbhwdb.submission import (
    CartridgeSubmission,
    ConsoleSubmission,
    SkippedUnit,
    Submission,
)
from gbhwdb.walker import UnitPath, resolve_photos, walk_units

logger = get_logger("crawler")


# ============================================================================
# Identity
# ============================================================================


class UnitNaming(Enum):
    """Unit directory naming conventions."""
    SERIAL = "serial"
    NUMERIC = "numeric"


SERIAL_PATTERN = re.compile(r"([A-Z]+)(?:-[A-Z0-9]+)*-?[0-9]+(?:-[0-9])?")
NUMERIC_PATTERN = re.compile(r"[0-9]+(?:-[0-9])?")

_NAMING_PATTERNS = (
    (UnitNaming.SERIAL, SERIAL_PATTERN),
    (UnitNaming.NUMERIC, NUMERIC_PATTERN),
)


@dataclass(frozen=True)
class UnitIdentity:
    title: str
    slug: str
    sort_group: Optional[str]


def slugify(text: str) -> str:
    """
    Convert text to a lowercase URL-safe slug.

    Example:
        >>> slugify("Jörg Müller-7")
        'jorg-muller-7'
    """
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-z0-9]+", "-", text.lower())
    return text.strip("-")


def unit_naming(name: str, path: Optional[Path] = None) -> UnitNaming:
    """
    Determine the naming convention of a unit directory name.

    Raises:
        MalformedUnitNameError: If the name follows no known convention
    """
    for naming, pattern in _NAMING_PATTERNS:
        if pattern.fullmatch(name):
            return naming
    raise MalformedUnitNameError(path if path is not None else name, name)


def derive_identity(contributor: str, name: str, path: Optional[Path] = None) -> UnitIdentity:
    """
    Derive title, slug and sort group from a unit directory name.

    Args:
        contributor: Contributor directory name
        name: Unit directory name
        path: Unit directory, used in error messages

    Returns:
        UnitIdentity

    Raises:
        MalformedUnitNameError: If the name is neither a serial nor a number

    Example:
        >>> derive_identity("alice", "DMG-ABCD-0")
        UnitIdentity(title='DMG-ABCD-0', slug='DMG-ABCD-0', sort_group='DMG')
        >>> derive_identity("bob", "7")
        UnitIdentity(title='Unit #7', slug='bob-7', sort_group=None)
    """
    naming = unit_naming(name, path)
    if naming is UnitNaming.SERIAL:
        return UnitIdentity(
            title=name,
            slug=name,
            sort_group=SERIAL_PATTERN.fullmatch(name).group(1),
        )
    return UnitIdentity(
        title=f"Unit #{name}",
        slug=slugify(f"{contributor}-{name}"),
        sort_group=None,
    )


# ============================================================================
# Crawl
# ============================================================================


@dataclass
class CrawlResult:
    """
    Outcome of a crawl.

    Attributes:
        consoles: Console submissions ordered by type, then listing order
        cartridges: Cartridge submissions ordered by ROM ID, then listing order
        skipped: Units excluded from the result, in path order
    """
    consoles: List[ConsoleSubmission] = field(default_factory=list)
    cartridges: List[CartridgeSubmission] = field(default_factory=list)
    skipped: List[SkippedUnit] = field(default_factory=list)

    @property
    def submissions(self) -> List[Submission]:
        return [*self.consoles, *self.cartridges]


def _crawl_unit(
    job: Tuple[UnitPath, HardwareDescriptor],
    strict_unit_names: bool,
) -> Union[Submission, SkippedUnit]:
    unit, descriptor = job
    unit_dir = unit.unit.path

    try:
        identity = derive_identity(unit.contributor.name, unit.unit.name, unit_dir)
    except MalformedUnitNameError as e:
        if strict_unit_names:
            raise
        logger.error(f"Skipping unit: {e}")
        return SkippedUnit(path=unit_dir, reason=str(e))

    try:
        metadata = read_metadata(unit_dir, descriptor.model)
    except MissingMetadataError as e:
        logger.warning(f"Skipping unit: {e}")
        return SkippedUnit(path=unit_dir, reason=str(e))
    except MetadataValidationError as e:
        logger.error(f"Skipping unit: {e}")
        return SkippedUnit(path=unit_dir, reason=str(e))

    photos = MappingProxyType(resolve_photos(unit_dir, descriptor.photos))

    if descriptor is CARTRIDGE:
        rom_id = unit.type_dir.name
        if get_game(rom_id) is None:
            logger.warning(f"Unknown cartridge ROM ID '{rom_id}': {unit_dir}")
        return CartridgeSubmission(
            type=rom_id,
            title=identity.title,
            slug=identity.slug,
            sort_group=identity.sort_group,
            contributor=unit.contributor.name,
            metadata=metadata,
            photos=photos,
        )

    return ConsoleSubmission(
        type=descriptor.id,
        title=identity.title,
        slug=identity.slug,
        sort_group=identity.sort_group,
        contributor=unit.contributor.name,
        metadata=metadata,
        photos=photos,
    )


def _check_unique_slugs(slug_paths: Dict[Tuple[str, str], List[Path]]) -> None:
    for (type_id, slug), paths in sorted(slug_paths.items()):
        if len(paths) > 1:
            raise DuplicateSlugError(type_id, slug, sorted(paths))


def _result_key(submission: Submission):
    return (submission.type, *submission_sort_key(submission))


def crawl(root: Union[str, Path], config: Optional[GbhwdbConfig] = None) -> CrawlResult:
    """
    Crawl the submission tree.

    Args:
        root: Data root (one directory per contributor)
        config: Pipeline configuration; defaults apply when omitted

    Returns:
        CrawlResult with deterministic ordering independent of directory
        listing order

    Raises:
        MalformedUnitNameError: On a malformed unit name in strict mode
        DuplicateSlugError: If two units of one type share a slug
        OSError: On filesystem errors other than absent photos
    """
    workers = config.crawl_workers if config else DEFAULT_CRAWL_WORKERS
    strict = config.strict_unit_names if config else True

    result = CrawlResult()
    jobs = []
    unknown_dirs = set()

    with ThreadPoolExecutor(max_workers=workers) as pool:
        for unit in walk_units(root, executor=pool):
            try:
                descriptor = require_hardware(unit.type_dir.path)
            except UnknownHardwareTypeError as e:
                if unit.type_dir.path not in unknown_dirs:
                    unknown_dirs.add(unit.type_dir.path)
                    logger.warning(f"Skipping units: {e}")
                result.skipped.append(SkippedUnit(path=unit.unit.path, reason=str(e)))
                continue
            jobs.append((unit, descriptor))

        outcomes = list(pool.map(partial(_crawl_unit, strict_unit_names=strict), jobs))

    slug_paths: Dict[Tuple[str, str], List[Path]] = {}
    for (unit, _), outcome in zip(jobs, outcomes):
        if isinstance(outcome, SkippedUnit):
            result.skipped.append(outcome)
            continue
        slug_paths.setdefault((outcome.type, outcome.slug), []).append(unit.unit.path)
        if isinstance(outcome, CartridgeSubmission):
            result.cartridges.append(outcome)
        else:
            result.consoles.append(outcome)

    _check_unique_slugs(slug_paths)

    result.consoles.sort(key=_result_key)
    result.cartridges.sort(key=_result_key)
    result.skipped.sort(key=lambda s: str(s.path))

    logger.info(
        f"Crawled {len(result.consoles)} consoles and {len(result.cartridges)} "
        f"cartridges ({len(result.skipped)} units skipped)"
    )
    return result

"""
Metadata reader and validator.

Reads a unit's ``metadata.json`` and validates it against the model of the
unit's hardware type. The hardware type comes from the type directory name:
console directories use a fixed uppercase vocabulary (``DMG`` -> ``dmg``),
cartridge directories are ROM IDs (``DMG-AAUJ-1``).

Validation failures are reported as MetadataValidationError carrying one
``field.path: message`` issue per problem, so the crawler can log exactly
which field of which file needs fixing.
"""

import json
from pathlib import Path
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from gbhwdb.exceptions import (
    MetadataValidationError,
    MissingMetadataError,
    UnknownHardwareTypeError,
)
from gbhwdb.logging_config import get_logger
from gbhwdb.schemas.cartridge import ROM_ID_PATTERN
from gbhwdb.schemas.registry import CARTRIDGE, CONSOLE_BY_DIRECTORY, HardwareDescriptor

logger = get_logger("metadata")

METADATA_FILENAME = "metadata.json"

M = TypeVar("M", bound=BaseModel)


def hardware_for_directory(name: str) -> Optional[HardwareDescriptor]:
    """
    Map a type directory name to its hardware descriptor.

    Args:
        name: Type directory name (e.g. "DMG", "CGB-BXTJ-0")

    Returns:
        Console descriptor, the cartridge descriptor for ROM-ID shaped
        names, or None if the name is not recognized
    """
    descriptor = CONSOLE_BY_DIRECTORY.get(name)
    if descriptor is not None:
        return descriptor
    if ROM_ID_PATTERN.fullmatch(name):
        return CARTRIDGE
    return None


def require_hardware(type_dir: Path) -> HardwareDescriptor:
    """
    Like hardware_for_directory(), but raise for unknown names.

    Raises:
        UnknownHardwareTypeError: If the directory name is not recognized
    """
    descriptor = hardware_for_directory(type_dir.name)
    if descriptor is None:
        raise UnknownHardwareTypeError(type_dir)
    return descriptor


def format_validation_issues(error: ValidationError) -> List[str]:
    """
    Turn a Pydantic ValidationError into ``field.path: message`` strings.

    Example:
        mainboard.cpu.year: Input should be greater than or equal to 1988
    """
    issues = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "<root>"
        issues.append(f"{loc}: {err['msg']}")
    return issues


def read_metadata(unit_dir: Path, model: Type[M]) -> M:
    """
    Read and validate a unit's metadata document.

    Args:
        unit_dir: Unit directory containing metadata.json
        model: Metadata model of the unit's hardware type

    Returns:
        Validated (frozen) model instance

    Raises:
        MissingMetadataError: If metadata.json does not exist
        MetadataValidationError: If the document is not UTF-8, not valid
            JSON, or fails schema validation
        OSError: For any other read failure
    """
    path = Path(unit_dir) / METADATA_FILENAME
    try:
        with open(path, encoding="utf-8") as f:
            raw = f.read()
    except FileNotFoundError:
        raise MissingMetadataError(path)
    except UnicodeDecodeError as e:
        raise MetadataValidationError(path, [f"<root>: Invalid encoding ({e})"])

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MetadataValidationError(path, [f"<root>: Invalid JSON ({e})"])

    try:
        metadata = model.model_validate(document)
    except ValidationError as e:
        raise MetadataValidationError(path, format_validation_issues(e))

    logger.debug(f"Validated {path} as {model.__name__}")
    return metadata

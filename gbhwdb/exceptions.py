"""
Custom exceptions for the crawl pipeline.

Provides specific exception types for data and configuration errors so the
crawler can decide per class whether a unit is skipped or the build aborts.
"""

from pathlib import Path
from typing import List, Optional, Union


class GbhwdbError(Exception):
    """Base exception for pipeline errors."""
    pass


class ConfigError(GbhwdbError):
    """Base exception for configuration errors."""
    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""
    pass


class UnitError(GbhwdbError):
    """Base exception for errors tied to a single unit directory."""

    def __init__(self, path: Union[str, Path], message: str):
        self.path = Path(path)
        self.message = message
        super().__init__(f"{message}: {self.path}")


class MissingMetadataError(UnitError):
    """Raised when a unit directory has no metadata.json."""

    def __init__(self, path: Union[str, Path]):
        super().__init__(path, "Missing metadata file")


class MetadataValidationError(UnitError):
    """
    Raised when a metadata document is malformed or fails schema validation.

    Attributes:
        path: Path to the metadata document
        issues: Human-readable issues, each prefixed with the offending
            field path (e.g. "mainboard.cpu.year: Input should be ...")
    """

    def __init__(self, path: Union[str, Path], issues: List[str]):
        self.issues = issues
        super().__init__(path, "Invalid metadata")

    def __str__(self) -> str:
        return f"{self.message}: {self.path} ({'; '.join(self.issues)})"


class UnknownHardwareTypeError(UnitError):
    """Raised when a type directory name is not a known hardware type."""

    def __init__(self, path: Union[str, Path], name: Optional[str] = None):
        self.name = name if name is not None else Path(path).name
        super().__init__(path, f"Unknown hardware type directory '{self.name}'")


class MalformedUnitNameError(UnitError):
    """
    Raised when a unit directory name is neither a serial nor a unit number.

    Unit names feed slug generation, so this is a data-entry defect that must
    be fixed in the submission tree.
    """

    def __init__(self, path: Union[str, Path], name: Optional[str] = None):
        self.name = name if name is not None else Path(path).name
        super().__init__(path, f'Unsupported unit directory name format "{self.name}"')


class DuplicateSlugError(GbhwdbError):
    """
    Raised when two units of the same type derive the same slug.

    Slugs name pages and photo files, so the build cannot continue.

    Attributes:
        type: Console type id or cartridge ROM ID
        slug: The colliding slug
        paths: Unit directories sharing the slug
    """

    def __init__(self, type: str, slug: str, paths: List[Path]):
        self.type = type
        self.slug = slug
        self.paths = paths
        super().__init__(
            f"Duplicate slug '{slug}' for {type}: "
            f"{', '.join(str(path) for path in paths)}"
        )


class LabelParseError(GbhwdbError):
    """Raised when a chip label matches no known marking format."""

    def __init__(self, label: str, reason: Optional[str] = None):
        self.label = label
        self.reason = reason
        message = f"Unrecognized chip label '{label}'"
        super().__init__(f"{message} ({reason})" if reason else message)

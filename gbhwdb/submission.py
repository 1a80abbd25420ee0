"""
Submission records produced by the crawler.

A submission is one contributed physical unit: a console (type is one of the
registered console ids) or a cartridge (type is the game's ROM ID). Records
are frozen; everything in them is derived from the directory tree, the
validated metadata document and photo stat snapshots.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from gbhwdb.schemas import SchemaModel
from gbhwdb.schemas.cartridge import GameConfig, get_game
from gbhwdb.schemas.registry import CARTRIDGE, CONSOLES, HardwareDescriptor
from gbhwdb.walker import Photo


@dataclass(frozen=True)
class Submission(ABC):
    """
    Common submission fields.

    Attributes:
        type: Console type id or cartridge ROM ID
        title: Display title ("DMG-ABCD-0", "Unit #7")
        slug: URL-safe identifier, unique within the type
        sort_group: Serial prefix used as the primary sort key, if any
        contributor: Contributor directory name
        metadata: Validated metadata model
        photos: Every photo role of the type -> Photo, or None when absent
            (read-only mapping)
    """
    type: str
    title: str
    slug: str
    sort_group: Optional[str]
    contributor: str
    metadata: SchemaModel
    photos: Mapping[str, Optional[Photo]]

    @property
    @abstractmethod
    def descriptor(self) -> HardwareDescriptor:
        """Hardware descriptor of the submission type."""

    @property
    def front_photo(self) -> Optional[Photo]:
        return self.photos.get("front")

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize for the JSON data export.

        Metadata keeps only the fields present in the source document, so an
        omitted field and an explicit null stay distinguishable.
        """
        return {
            "type": self.type,
            "title": self.title,
            "slug": self.slug,
            "sort_group": self.sort_group,
            "contributor": self.contributor,
            "metadata": self.metadata.model_dump(mode="json", exclude_unset=True),
            "photos": {
                role: photo.to_dict() if photo else None
                for role, photo in self.photos.items()
            },
        }


@dataclass(frozen=True)
class ConsoleSubmission(Submission):
    """A console unit (``type`` is a console type id such as ``dmg``)."""

    @property
    def descriptor(self) -> HardwareDescriptor:
        return CONSOLES[self.type]


@dataclass(frozen=True)
class CartridgeSubmission(Submission):
    """A cartridge unit (``type`` is the game ROM ID)."""

    @property
    def descriptor(self) -> HardwareDescriptor:
        return CARTRIDGE

    @property
    def game(self) -> Optional[GameConfig]:
        """Game reference data, or None for an unknown ROM ID."""
        return get_game(self.type)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        game = self.game
        data["game"] = game.name if game else None
        return data


@dataclass(frozen=True)
class SkippedUnit:
    """A unit directory excluded from the result, with the reason."""
    path: Path
    reason: str

"""
Classification and grouping of crawled submissions.

Derives facts that are not stored verbatim in metadata documents:
- Mapper family of a cartridge (explicit chip kind, then the parsed chip
  label, else layout inference)
- Structured facts parsed from cartridge chip labels
- Groups by hardware type, game ROM ID and mapper id
- The total listing order: serial sort group first (units without one
  last), then slug
"""

from typing import Callable, Dict, Hashable, Iterable, List, Optional, Tuple, TypeVar

from gbhwdb.logging_config import get_logger
from gbhwdb.parser import MultiParser, ParsedLabel
from gbhwdb.parser.mapper import MAPPER
from gbhwdb.parser.mask_rom import MASK_ROM
from gbhwdb.schemas import MISSING, field_value
from gbhwdb.schemas.cartridge import MAPPER_KINDS, NO_MAPPER, UNCLASSIFIED, CartLayout
from gbhwdb.submission import CartridgeSubmission, Submission

logger = get_logger("crawler")

S = TypeVar("S", bound=Submission)
K = TypeVar("K", bound=Hashable)


# ============================================================================
# Ordering
# ============================================================================


def submission_sort_key(submission: Submission) -> Tuple[bool, str, str]:
    """
    Sort key for listings.

    Submissions with a sort group come first, ordered by group; slug breaks
    ties and orders the group-less tail.
    """
    return (
        submission.sort_group is None,
        submission.sort_group or "",
        submission.slug,
    )


def sort_submissions(submissions: Iterable[S]) -> List[S]:
    return sorted(submissions, key=submission_sort_key)


def _group(submissions: Iterable[S], key: Callable[[S], K]) -> Dict[K, List[S]]:
    groups: Dict[K, List[S]] = {}
    for submission in submissions:
        groups.setdefault(key(submission), []).append(submission)
    return {
        group_key: sort_submissions(groups[group_key])
        for group_key in sorted(groups, key=lambda k: (k is None, k or ""))
    }


def group_by_type(submissions: Iterable[S]) -> Dict[str, List[S]]:
    """
    Partition submissions by ``type``.

    Returns:
        Dictionary of type -> sorted submissions, keys in sorted order
    """
    return _group(submissions, lambda s: s.type)


def group_by_game(cartridges: Iterable[CartridgeSubmission]) -> Dict[str, List[CartridgeSubmission]]:
    """Partition cartridges by game ROM ID."""
    return _group(cartridges, lambda s: s.type)


def group_by_mapper(
    cartridges: Iterable[CartridgeSubmission],
) -> Dict[Optional[str], List[CartridgeSubmission]]:
    """
    Partition cartridges by classified mapper.

    Keys are mapper ids, ``unclassified``, or None for cartridges whose
    mapper cannot be determined (None sorts last).
    """
    return _group(cartridges, classify_mapper)


# ============================================================================
# Chip Labels
# ============================================================================

LABEL_PARSERS: Dict[str, MultiParser] = {
    "mapper": MAPPER,
    "rom": MASK_ROM,
}


def parse_chip_label(cartridge: CartridgeSubmission, slot: str) -> Optional[ParsedLabel]:
    """
    Parse the label of a cartridge chip.

    One-digit year codes are resolved against the board year when the board
    records one.

    Args:
        cartridge: Cartridge submission
        slot: Chip slot with a known label format ("mapper" or "rom")

    Returns:
        Parsed facts, or None when the chip or its label is absent or the
        label matches no known format
    """
    board = field_value(cartridge.metadata, "board")
    label = field_value(field_value(board, slot), "label")
    if label is MISSING or label is None:
        return None
    parsed = LABEL_PARSERS[slot].try_parse(label)
    if parsed is None:
        logger.debug(f"Unrecognized {slot} label '{label}' in {cartridge.type}/{cartridge.slug}")
        return None
    year = field_value(board, "year")
    return parsed.with_year_hint(year if isinstance(year, int) else None)


# ============================================================================
# Mapper Classification
# ============================================================================


def layout_for(cartridge: CartridgeSubmission) -> Optional[CartLayout]:
    """Primary board layout of the cartridge's game, or None if unknown."""
    game = cartridge.game
    return game.layout if game else None


def _lookup_kind(cartridge: CartridgeSubmission, kind: str) -> str:
    mapper_id = MAPPER_KINDS.get(kind)
    if mapper_id is None:
        logger.warning(
            f"Unknown mapper kind '{kind}' in {cartridge.type}/{cartridge.slug}"
        )
        return UNCLASSIFIED
    return mapper_id


def classify_mapper(cartridge: CartridgeSubmission) -> Optional[str]:
    """
    Classify the mapper chip of a cartridge.

    Priority:
    1. Explicit ``board.mapper.kind``, looked up exactly in MAPPER_KINDS.
       Unknown kinds are logged and classified as ``unclassified``.
    2. The kind read from ``board.mapper.label`` by the mapper label
       parser. Unrecognized labels fall through.
    3. The game's primary layout: no mapper position -> ``no-mapper``.
       A layout with a mapper position gives no answer.

    Args:
        cartridge: Cartridge submission

    Returns:
        Mapper id, ``unclassified``, or None when indeterminate
    """
    mapper = field_value(cartridge.metadata.board, "mapper")
    kind = field_value(mapper, "kind")
    if kind is not MISSING and kind is not None:
        return _lookup_kind(cartridge, kind)

    parsed = parse_chip_label(cartridge, "mapper")
    if parsed is not None and parsed.kind is not None:
        return _lookup_kind(cartridge, parsed.kind)

    layout = layout_for(cartridge)
    if layout is None:
        return None
    if not layout.has_chip("mapper"):
        return NO_MAPPER
    return None

"""
Photo asset processing.

Copies every submission photo into ``<static>/<type>/<slug>_<photo name>``
and renders thumbnails of the front photo as
``<slug>_thumbnail_<size>.jpg``.

Processing is incremental: a target is only (re)written when it is missing
or its mtime differs from the source photo's mtime recorded during the crawl,
and every written target gets the source mtime stamped on it. Submissions are
processed on a thread pool bounded by ``photo_workers``.
"""

import os
import shutil
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Iterable, Sequence

from PIL import Image

from gbhwdb.logging_config import get_logger
from gbhwdb.submission import Submission
from gbhwdb.walker import FileStats, Photo

logger = get_logger("photos")

JPEG_QUALITY = 90


@dataclass
class PhotoResult:
    """Counts of files written for one or more submissions."""
    copied: int = 0
    thumbnails: int = 0

    def __add__(self, other: "PhotoResult") -> "PhotoResult":
        return PhotoResult(
            copied=self.copied + other.copied,
            thumbnails=self.thumbnails + other.thumbnails,
        )


# ============================================================================
# Change Detection
# ============================================================================


def is_outdated(target: Path, source_stats: FileStats) -> bool:
    """
    Check whether a derived file must be regenerated.

    Returns:
        True if target does not exist or its mtime differs from the source's
    """
    try:
        stat = target.stat()
    except FileNotFoundError:
        return True
    return stat.st_mtime != source_stats.mtime


def set_modification_time(target: Path, source_stats: FileStats) -> None:
    os.utime(target, (source_stats.mtime, source_stats.mtime))


# ============================================================================
# Derivatives
# ============================================================================


def write_thumbnail(source: Photo, target: Path, width: int) -> None:
    """
    Render a JPEG thumbnail of the given width, preserving aspect ratio.

    Args:
        source: Source photo
        target: Output path
        width: Thumbnail width in pixels
    """
    with Image.open(source.path) as im:
        height = max(1, round(im.height * width / im.width))
        thumbnail = im.convert("RGB").resize((width, height), Image.LANCZOS)
        thumbnail.save(target, "JPEG", quality=JPEG_QUALITY)


def process_submission_photos(
    submission: Submission,
    static_dir: Path,
    thumbnail_sizes: Sequence[int] = (80, 50),
) -> PhotoResult:
    """
    Copy the photos of one submission and render its thumbnails.

    Args:
        submission: Crawled submission
        static_dir: Static asset root; files go to ``<static_dir>/<type>/``
        thumbnail_sizes: Thumbnail widths

    Returns:
        PhotoResult with the number of files actually written
    """
    result = PhotoResult()
    label = f"[{submission.type}] {submission.slug}"

    photos = [photo for photo in submission.photos.values() if photo is not None]
    if not photos:
        logger.warning(f"{label}: no photos")
        return result

    target_dir = Path(static_dir) / submission.type
    target_dir.mkdir(parents=True, exist_ok=True)

    for photo in photos:
        target = target_dir / f"{submission.slug}_{photo.name}"
        if is_outdated(target, photo.stats):
            shutil.copy2(photo.path, target)
            set_modification_time(target, photo.stats)
            result.copied += 1
            logger.debug(f"{label}: copied photo {target}")

    front = submission.front_photo
    if front is None:
        logger.warning(f"{label}: thumbnail source is not available")
        return result

    for size in thumbnail_sizes:
        target = target_dir / f"{submission.slug}_thumbnail_{size}.jpg"
        if is_outdated(target, front.stats):
            write_thumbnail(front, target, size)
            set_modification_time(target, front.stats)
            result.thumbnails += 1
            logger.debug(f"{label}: wrote thumbnail {target}")

    return result


def process_photos(
    submissions: Iterable[Submission],
    static_dir: Path,
    workers: int = 4,
    thumbnail_sizes: Sequence[int] = (80, 50),
) -> PhotoResult:
    """
    Process the photos of many submissions with bounded concurrency.

    Args:
        submissions: Crawled submissions
        static_dir: Static asset root
        workers: Maximum number of submissions processed at once
        thumbnail_sizes: Thumbnail widths

    Returns:
        Aggregated PhotoResult
    """
    task = partial(
        process_submission_photos,
        static_dir=Path(static_dir),
        thumbnail_sizes=tuple(thumbnail_sizes),
    )
    total = PhotoResult()
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for result in pool.map(task, submissions):
            total = total + result

    logger.info(f"Copied {total.copied} photos, wrote {total.thumbnails} thumbnails")
    return total

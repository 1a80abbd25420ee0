"""
One-shot build run.

Ties the pipeline together: crawl the data root, write the JSON data dumps
and CSV tables consumed by the page renderer, then copy photos and render
thumbnails. Output layout under the build directory:

    data/<type>.json, data/cartridges.json
    csv/<type>.csv, csv/cartridges.csv
    static/<type>/<slug>_<photo>, static/<type>/<slug>_thumbnail_<size>.jpg
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional

from gbhwdb.classification import group_by_mapper, group_by_type
from gbhwdb.config import GbhwdbConfig
from gbhwdb.crawler import CrawlResult, crawl
from gbhwdb.csv_export import export_csvs
from gbhwdb.format import mapper_name
from gbhwdb.logging_config import get_logger, init_logging
from gbhwdb.photos import PhotoResult, process_photos
from gbhwdb.schemas.registry import CONSOLES
from gbhwdb.submission import Submission

logger = get_logger("build")

DATA_SUBDIR = "data"
CSV_SUBDIR = "csv"
STATIC_SUBDIR = "static"


@dataclass
class BuildSummary:
    """What a build run produced."""
    result: CrawlResult
    data_files: Dict[str, Path]
    csv_files: Dict[str, Path]
    photos: PhotoResult


def write_json(submissions: Iterable[Submission], path: Path) -> None:
    data = [submission.to_dict() for submission in submissions]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")


def export_data(result: CrawlResult, out_dir: Path) -> Dict[str, Path]:
    """
    Write one JSON list of serialized submissions per console type, plus
    ``cartridges.json``.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    by_type = group_by_type(result.consoles)
    written = {}

    for type_id in CONSOLES:
        path = out_dir / f"{type_id}.json"
        write_json(by_type.get(type_id, []), path)
        written[type_id] = path

    path = out_dir / "cartridges.json"
    write_json(result.cartridges, path)
    written["cartridges"] = path
    return written


def build(config: Optional[GbhwdbConfig] = None, init: bool = True) -> BuildSummary:
    """
    Run a full build.

    Args:
        config: Pipeline configuration (loaded from the default location
            when omitted)
        init: Configure logging handlers before building

    Returns:
        BuildSummary

    Raises:
        ConfigValidationError: If the configuration is invalid
        MalformedUnitNameError: On a malformed unit name in strict mode
        OSError: On filesystem errors
    """
    config = config or GbhwdbConfig()
    if init:
        init_logging(config.log_level)
    config.validate()

    build_dir = config.build_dir
    logger.info(f"Building from {config.data_dir} into {build_dir}")

    result = crawl(config.data_dir, config)

    data_files = export_data(result, build_dir / DATA_SUBDIR)
    csv_files = export_csvs(result.consoles, result.cartridges, build_dir / CSV_SUBDIR)
    photos = process_photos(
        result.submissions,
        build_dir / STATIC_SUBDIR,
        workers=config.photo_workers,
        thumbnail_sizes=config.thumbnail_sizes,
    )

    for type_id, submissions in group_by_type(result.consoles).items():
        logger.info(f"{CONSOLES[type_id].name}: {len(submissions)} submissions")
    for mapper_id, cartridges in group_by_mapper(result.cartridges).items():
        logger.info(f"Mapper {mapper_name(mapper_id)}: {len(cartridges)} cartridges")
    if result.skipped:
        logger.warning(f"{len(result.skipped)} units were skipped")

    return BuildSummary(
        result=result,
        data_files=data_files,
        csv_files=csv_files,
        photos=photos,
    )

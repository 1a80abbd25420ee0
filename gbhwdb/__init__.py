"""
gbhwdb - Game Boy hardware database site data pipeline.

This package crawls the contributed submission tree (metadata documents and
photographs), validates every unit against its hardware schema and produces
the data model consumed by the page renderer, CSV exports and photo assets.

Key modules:
- walker: Directory enumeration and photo resolution
- metadata: metadata.json reading and schema validation
- crawler: Submission assembly and identity derivation
- classification: Mapper classification, grouping and ordering
- format: Calendar, manufacturer and optional-value rendering
- csv_export: Per-type CSV tables
- photos: Incremental photo copies and thumbnails
- builder: One-shot build run tying everything together
"""

import os

__version__ = os.environ.get("GBHWDB_VERSION", "0.1.0")

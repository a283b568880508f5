"""Normalization of GBIF response shapes into schema records.

Every "missing field" decision for GBIF data lives here.
"""

from __future__ import annotations

import logging
from typing import Any

from biodiversity_explorer.schemas import OccurrencePage, Region

logger = logging.getLogger(__name__)


def parse_region(record: Any) -> Region | None:
    """Parse one GADM browse entry. Returns None if id or name is missing."""
    if not isinstance(record, dict):
        return None
    gid = record.get("id")
    name = record.get("name")
    if not gid or not name or not str(name).strip():
        logger.debug("Skipping GADM entry without id/name: %r", record)
        return None
    return Region(id=str(gid), name=str(name))


def parse_regions(payload: Any) -> list[Region]:
    """Parse the GADM browse payload (a bare JSON array).

    Duplicated ids keep their first occurrence.
    """
    if not isinstance(payload, list):
        logger.warning("Unexpected GADM browse payload type: %s", type(payload).__name__)
        return []
    regions: list[Region] = []
    seen: set[str] = set()
    for record in payload:
        region = parse_region(record)
        if region is None or region.id in seen:
            continue
        seen.add(region.id)
        regions.append(region)
    return regions


def parse_occurrence_page(payload: Any) -> OccurrencePage:
    """Parse an /occurrence/search response into an OccurrencePage."""
    if not isinstance(payload, dict):
        return OccurrencePage()
    results = payload.get("results")
    records = [r for r in results if isinstance(r, dict)] if isinstance(results, list) else []
    count = payload.get("count")
    total = count if isinstance(count, int) and count >= 0 else len(records)
    return OccurrencePage(total=total, records=records)

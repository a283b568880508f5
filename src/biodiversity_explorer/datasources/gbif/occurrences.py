"""Raw occurrence search scoped by GADM region id."""

from __future__ import annotations

import logging
from typing import Any

import requests

from biodiversity_explorer.config import get_settings
from biodiversity_explorer.datasources.gbif import client
from biodiversity_explorer.datasources.gbif.parsing import parse_occurrence_page
from biodiversity_explorer.schemas import OccurrencePage

logger = logging.getLogger(__name__)


def build_occurrence_params(
    region_id: str,
    *,
    kingdom: int | None = None,
    class_key: int | None = None,
    limit: int = 20,
    offset: int = 0,
    require_image: bool = True,
) -> dict[str, Any]:
    """Build /occurrence/search query params. Unset filters are omitted."""
    params: dict[str, Any] = {
        "country": get_settings().country_iso2,
        "gadmGid": region_id,
        "limit": max(0, min(limit, client.MAX_LIMIT)),
        "offset": max(0, offset),
    }
    if kingdom:
        params["kingdomKey"] = kingdom
    if class_key:
        params["classKey"] = class_key
    if require_image:
        params["mediaType"] = "StillImage"
    return params


def search_occurrences(
    region_id: str,
    kingdom: int | None = None,
    class_key: int | None = None,
    limit: int = 20,
    offset: int = 0,
    require_image: bool = True,
) -> OccurrencePage:
    """
    Search GBIF occurrences inside one region.

    The region id is the GADM gid from ``RegionCatalog``; no iNaturalist
    place resolution is involved.

    Args:
        region_id: GADM gid, e.g. ``"KEN.30_1"``.
        kingdom: GBIF kingdom key (see ``reference.GBIF_KINGDOMS``).
        class_key: GBIF class key (see ``reference.GBIF_CLASSES``).
        limit: Page size (API max 300).
        offset: Record offset for paging.
        require_image: Restrict to records carrying still images.

    Returns:
        OccurrencePage; ``total=0`` and no records on any provider failure.
    """
    params = build_occurrence_params(
        region_id,
        kingdom=kingdom,
        class_key=class_key,
        limit=limit,
        offset=offset,
        require_image=require_image,
    )
    try:
        payload = client.search_occurrences(params)
    except (requests.RequestException, ValueError) as e:
        logger.warning("Occurrence search failed for %s: %s", region_id, e)
        return OccurrencePage()
    return parse_occurrence_page(payload)

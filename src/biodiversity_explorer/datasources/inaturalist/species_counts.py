"""Species observed in a region: iNaturalist species counts by resolved place.

Two stages, each usable on its own:

1. ``PlaceResolver.resolve(region_name)`` → ``ResolvedPlace``
2. ``fetch_species_counts(place_id, ...)`` → ``list[OccurrenceAggregate]``

``get_aggregates`` chains them and never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import requests

from biodiversity_explorer.datasources.inaturalist import client
from biodiversity_explorer.datasources.inaturalist.parsing import parse_aggregates
from biodiversity_explorer.datasources.inaturalist.places import PlaceResolver
from biodiversity_explorer.schemas import OccurrenceAggregate

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 60


def build_species_count_params(
    place_id: str,
    taxon_scope: int | None = None,
    limit: int = DEFAULT_LIMIT,
    page: int = 1,
) -> dict[str, Any]:
    """
    Query params for /observations/species_counts.

    Only verifiable observations with photos, species rank only (both rank
    bounds are ``species`` so subspecies and varieties are excluded),
    most-observed first.
    """
    params: dict[str, Any] = {
        "place_id": place_id,
        "per_page": min(limit, client.MAX_SPECIES_COUNTS_PER_PAGE),
        "page": max(page, 1),
        "verifiable": "true",
        "photos": "true",
        "order_by": "observations_count",
        "hrank": "species",
        "lrank": "species",
    }
    if taxon_scope is not None:
        params["taxon_id"] = taxon_scope
    return params


def fetch_species_counts(
    place_id: str,
    taxon_scope: int | None = None,
    limit: int = DEFAULT_LIMIT,
    page: int = 1,
) -> list[OccurrenceAggregate]:
    """
    Fetch species counts for an already-resolved place.

    Returns the provider's ordering (descending observation count); no
    client-side re-sort. Any provider failure yields ``[]``.
    """
    if limit < 1:
        return []
    params = build_species_count_params(place_id, taxon_scope, limit, page)
    try:
        payload = client.get_species_counts(params)
    except (requests.RequestException, ValueError) as e:
        logger.warning("Species counts failed for place %s: %s", place_id, e)
        return []
    return parse_aggregates(payload)


def get_aggregates(
    region_name: str,
    taxon_scope: int | None = None,
    limit: int = DEFAULT_LIMIT,
    page: int = 1,
    *,
    resolver: PlaceResolver | None = None,
) -> list[OccurrenceAggregate]:
    """
    Species observed in a region, most-observed first.

    Args:
        region_name: Canonical region name from ``RegionCatalog``.
        taxon_scope: iNaturalist taxon id to restrict to (see ``reference.INAT_TAXA``).
        limit: Page size.
        page: 1-based page number.
        resolver: Place resolver to use (default: a fresh ``PlaceResolver``).

    Returns:
        List of OccurrenceAggregate; empty when the region does not resolve
        or any provider call fails.
    """
    resolved = (resolver or PlaceResolver()).resolve(region_name)
    if resolved.place_id is None:
        logger.info("No place for region %r; returning no species", region_name)
        return []
    return fetch_species_counts(resolved.place_id, taxon_scope, limit, page)


def filter_aggregates(
    aggregates: Iterable[OccurrenceAggregate],
    term: str,
) -> list[OccurrenceAggregate]:
    """Keep aggregates whose scientific or common name contains ``term``."""
    needle = term.strip().lower()
    if not needle:
        return list(aggregates)
    return [
        a
        for a in aggregates
        if needle in a.taxon.scientific_name.lower()
        or needle in (a.taxon.common_name or "").lower()
    ]

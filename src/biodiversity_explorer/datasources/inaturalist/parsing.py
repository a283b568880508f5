"""Normalization of iNaturalist response shapes into schema records.

iNaturalist omits fields freely: taxa without common names, photos without
a large variant, vision results with only some score fields. Every
"missing field → None" decision for this provider is made here, one
function per entity, so the fetch modules never probe raw dicts.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from biodiversity_explorer.schemas import (
    IdentificationCandidate,
    OccurrenceAggregate,
    PlaceCandidate,
    TaxonDetail,
    TaxonSummary,
)

logger = logging.getLogger(__name__)

MAX_PHOTOS = 10

# Vision result score fields, highest precedence first
SCORE_FIELDS = ("combined_score", "vision_score", "frequency_score")


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _results(payload: Any) -> list[dict[str, Any]]:
    """The ``results`` array of a response, or [] for any other shape."""
    if not isinstance(payload, dict):
        return []
    results = payload.get("results")
    if not isinstance(results, list):
        return []
    return [r for r in results if isinstance(r, dict)]


# =============================================================================
# Places
# =============================================================================


def parse_place_candidates(payload: Any) -> list[PlaceCandidate]:
    """Autocomplete results in provider order; entries without an id are dropped."""
    candidates = []
    for result in _results(payload):
        place_id = result.get("id")
        if place_id is None or place_id == "":
            continue
        candidates.append(
            PlaceCandidate(
                id=str(place_id),
                name=_str_or_none(result.get("name")),
                display_name=_str_or_none(result.get("display_name")),
            )
        )
    return candidates


# =============================================================================
# Taxa
# =============================================================================


def parse_taxon_summary(taxon: Any) -> TaxonSummary | None:
    """Parse a taxon object. Returns None if it has no usable id or name."""
    if not isinstance(taxon, dict):
        return None
    taxon_id = taxon.get("id")
    name = _str_or_none(taxon.get("name"))
    if not isinstance(taxon_id, int) or isinstance(taxon_id, bool) or name is None:
        logger.debug("Skipping taxon without id/name: %r", taxon.get("id"))
        return None
    photo = taxon.get("default_photo")
    photo_url = None
    if isinstance(photo, dict):
        photo_url = _str_or_none(photo.get("medium_url")) or _str_or_none(photo.get("url"))
    return TaxonSummary(
        id=taxon_id,
        scientific_name=name,
        common_name=_str_or_none(taxon.get("preferred_common_name")),
        iconic_group=_str_or_none(taxon.get("iconic_taxon_name")),
        photo_url=photo_url,
    )


def parse_aggregate(result: Any) -> OccurrenceAggregate | None:
    """Parse one species_counts entry."""
    if not isinstance(result, dict):
        return None
    taxon = parse_taxon_summary(result.get("taxon"))
    if taxon is None:
        return None
    count = result.get("count")
    if not isinstance(count, int) or count < 0:
        count = 0
    return OccurrenceAggregate(taxon=taxon, observation_count=count)


def parse_aggregates(payload: Any) -> list[OccurrenceAggregate]:
    """Parse a species_counts response, keeping provider order."""
    aggregates = []
    for result in _results(payload):
        aggregate = parse_aggregate(result)
        if aggregate is not None:
            aggregates.append(aggregate)
    return aggregates


def photo_urls(taxon_photos: Any, limit: int = MAX_PHOTOS) -> list[str]:
    """
    Extract photo URLs from a taxon's ``taxon_photos`` collection.

    Prefers ``large_url`` and falls back to ``medium_url``; photos with
    neither are skipped. Duplicates are dropped and at most ``limit`` URLs
    are returned, in collection order.
    """
    if not isinstance(taxon_photos, list):
        return []
    urls: list[str] = []
    for entry in taxon_photos:
        if len(urls) >= limit:
            break
        photo = entry.get("photo") if isinstance(entry, dict) else None
        if not isinstance(photo, dict):
            continue
        url = _str_or_none(photo.get("large_url")) or _str_or_none(photo.get("medium_url"))
        if url is None or url in urls:
            continue
        urls.append(url)
    return urls


def parse_taxon_detail(record: Any) -> TaxonDetail | None:
    """Parse a ``/taxa/{id}`` result object into a TaxonDetail."""
    if not isinstance(record, dict):
        return None
    taxon_id = record.get("id")
    if not isinstance(taxon_id, int) or isinstance(taxon_id, bool):
        return None
    return TaxonDetail(
        id=taxon_id,
        rank=_str_or_none(record.get("rank")),
        iconic_group=_str_or_none(record.get("iconic_taxon_name")),
        is_extinct=bool(record.get("extinct")),
        summary_html=_str_or_none(record.get("wikipedia_summary")),
        photo_urls=tuple(photo_urls(record.get("taxon_photos"))),
    )


# =============================================================================
# Computer vision
# =============================================================================


def score_of(result: dict[str, Any]) -> float:
    """
    Confidence of a vision result in [0, 1].

    Uses the first populated field of ``SCORE_FIELDS``, defaulting to 0.
    iNaturalist reports every score as a percentage (0-100), including
    low-ranked candidates below 1%, so all values are divided by 100.
    """
    for field in SCORE_FIELDS:
        value = result.get(field)
        if isinstance(value, int | float) and not isinstance(value, bool):
            score = float(value)
            break
    else:
        return 0.0
    if math.isnan(score):
        return 0.0
    return min(max(score / 100, 0.0), 1.0)


def parse_candidates(payload: Any) -> list[IdentificationCandidate]:
    """Parse score_image results, keeping provider order."""
    candidates = []
    for result in _results(payload):
        taxon = parse_taxon_summary(result.get("taxon"))
        if taxon is None:
            continue
        candidates.append(IdentificationCandidate(taxon=taxon, confidence=score_of(result)))
    return candidates

"""Taxon detail lookups with an optional short-lived cache."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import requests

from biodiversity_explorer.config import get_settings
from biodiversity_explorer.datasources.inaturalist import client
from biodiversity_explorer.datasources.inaturalist.parsing import parse_taxon_detail
from biodiversity_explorer.schemas import TaxonDetail

logger = logging.getLogger(__name__)


class DetailCache:
    """In-memory TaxonDetail cache; each entry expires ``ttl`` after it is stored."""

    def __init__(self, ttl: timedelta | None = None) -> None:
        if ttl is None:
            ttl = timedelta(seconds=get_settings().detail_cache_ttl_seconds)
        self.ttl = ttl
        self._entries: dict[int, tuple[datetime, TaxonDetail]] = {}

    def get(self, taxon_id: int) -> TaxonDetail | None:
        entry = self._entries.get(taxon_id)
        if entry is None:
            return None
        valid_until, detail = entry
        if datetime.now(UTC) >= valid_until:
            del self._entries[taxon_id]
            return None
        return detail

    def put(self, detail: TaxonDetail) -> None:
        self._entries[detail.id] = (datetime.now(UTC) + self.ttl, detail)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def get_detail(taxon_id: int | None, *, cache: DetailCache | None = None) -> TaxonDetail | None:
    """
    Fetch a taxon's descriptive record and up to 10 photos.

    Returns None when ``taxon_id`` is falsy, the taxon does not exist, or
    the provider fails. A taxon with no usable photos still returns a
    TaxonDetail, with empty ``photo_urls``.
    """
    if not taxon_id:
        return None

    if cache is not None:
        cached = cache.get(taxon_id)
        if cached is not None:
            return cached

    try:
        payload = client.get_taxon(taxon_id)
    except requests.HTTPError as e:
        if e.response is not None and e.response.status_code == 404:
            logger.info("Taxon %s not found", taxon_id)
        else:
            logger.warning("Taxon lookup failed for %s: %s", taxon_id, e)
        return None
    except (requests.RequestException, ValueError) as e:
        logger.warning("Taxon lookup failed for %s: %s", taxon_id, e)
        return None

    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list) or not results:
        logger.info("Taxon %s not found", taxon_id)
        return None

    detail = parse_taxon_detail(results[0])
    if detail is None:
        logger.warning("Unparseable taxon record for %s", taxon_id)
        return None
    if cache is not None:
        cache.put(detail)
    return detail

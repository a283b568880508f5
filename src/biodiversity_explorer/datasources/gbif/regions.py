"""Administrative regions (Kenyan counties) from GBIF's GADM browse."""

from __future__ import annotations

import logging

import requests

from biodiversity_explorer.config import get_settings
from biodiversity_explorer.datasources.gbif import client
from biodiversity_explorer.datasources.gbif.parsing import parse_regions
from biodiversity_explorer.schemas import Region

logger = logging.getLogger(__name__)


class RegionCatalog:
    """
    Canonical region list for one country, cached for the process lifetime.

    GADM boundaries change on the order of years, so the first successful
    fetch is kept until ``refresh()``. A failed fetch returns an empty list
    and is not cached.
    """

    def __init__(self, country_code: str | None = None) -> None:
        self.country_code = country_code or get_settings().country_code
        self._regions: tuple[Region, ...] | None = None

    def list_regions(self) -> list[Region]:
        """Return all regions, fetching once. Never raises."""
        if self._regions is None:
            regions = self._fetch()
            if not regions:
                return []
            self._regions = tuple(regions)
        return list(self._regions)

    def refresh(self) -> list[Region]:
        """Drop the cached list and fetch again."""
        self._regions = None
        return self.list_regions()

    def get(self, region_id: str) -> Region | None:
        """Look up a region by GADM id."""
        for region in self.list_regions():
            if region.id == region_id:
                return region
        return None

    def name_for(self, region_id: str) -> str | None:
        region = self.get(region_id)
        return region.name if region else None

    def search(self, term: str) -> list[Region]:
        """Regions whose name contains ``term`` (case-insensitive)."""
        needle = term.strip().lower()
        regions = self.list_regions()
        if not needle:
            return regions
        return [r for r in regions if needle in r.name.lower()]

    def _fetch(self) -> list[Region]:
        try:
            payload = client.browse_gadm(self.country_code)
        except (requests.RequestException, ValueError) as e:
            logger.warning("Failed to fetch regions for %s: %s", self.country_code, e)
            return []
        regions = parse_regions(payload)
        logger.debug("Fetched %d regions for %s", len(regions), self.country_code)
        return regions


_default_catalog: RegionCatalog | None = None


def default_catalog() -> RegionCatalog:
    """Shared catalog for the configured country."""
    global _default_catalog  # noqa: PLW0603
    if _default_catalog is None:
        _default_catalog = RegionCatalog()
    return _default_catalog


def list_regions() -> list[Region]:
    """List regions from the shared catalog."""
    return default_catalog().list_regions()

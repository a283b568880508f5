"""GBIF registry data source.

Public API:
  - client: Low-level HTTP helpers
  - regions: RegionCatalog, list_regions
  - occurrences: search_occurrences
  - species: get_species
"""

from biodiversity_explorer.datasources.gbif.occurrences import search_occurrences
from biodiversity_explorer.datasources.gbif.regions import (
    RegionCatalog,
    default_catalog,
    list_regions,
)
from biodiversity_explorer.datasources.gbif.species import get_species

__all__ = [
    "RegionCatalog",
    "default_catalog",
    "get_species",
    "list_regions",
    "search_occurrences",
]

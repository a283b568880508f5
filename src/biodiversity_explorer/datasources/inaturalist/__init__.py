"""iNaturalist observation data source.

Public API:
  - client: Low-level HTTP helpers
  - parsing: Response normalization (one function per entity)
  - places: choose_place, PlaceResolver, resolve_place
  - species_counts: get_aggregates, fetch_species_counts, filter_aggregates
  - taxa: get_detail, DetailCache
  - vision: identify
"""

from biodiversity_explorer.datasources.inaturalist.places import (
    CountryBiasedMatch,
    PlaceMatchStrategy,
    PlaceResolver,
    choose_place,
    resolve_place,
)
from biodiversity_explorer.datasources.inaturalist.species_counts import (
    fetch_species_counts,
    filter_aggregates,
    get_aggregates,
)
from biodiversity_explorer.datasources.inaturalist.taxa import DetailCache, get_detail
from biodiversity_explorer.datasources.inaturalist.vision import identify

__all__ = [
    "CountryBiasedMatch",
    "DetailCache",
    "PlaceMatchStrategy",
    "PlaceResolver",
    "choose_place",
    "fetch_species_counts",
    "filter_aggregates",
    "get_aggregates",
    "get_detail",
    "identify",
    "resolve_place",
]

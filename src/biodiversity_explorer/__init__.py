"""Kenya Biodiversity Explorer - county-level flora and fauna from GBIF and iNaturalist.

Architecture::

    datasources/   External APIs (GBIF registry, iNaturalist observations)
    schemas.py     Normalized records every datasource returns
    api.py         Awaitable, cancellable wrappers around the datasources
    store.py       JSON snapshots with freshness metadata (flows only)
    reference/     Static taxon group presets and iconic categories
    flows/         Prefect orchestration (region snapshot, bulk place verification)
    services/      Shared utilities (HTTP session)

Data flow: GBIF regions → iNaturalist place resolution → species counts →
taxon detail on demand. GBIF occurrence search is an alternate path keyed
directly by region id.

The two providers share no identifiers. Regions are joined to iNaturalist
places by name through a fuzzy autocomplete, see
``datasources/inaturalist/places.py`` for the matching rule and its known
false positives.
"""

__version__ = "0.1.0"

from biodiversity_explorer.config import Settings
from biodiversity_explorer.schemas import (
    IdentificationCandidate,
    OccurrenceAggregate,
    OccurrencePage,
    Region,
    ResolvedPlace,
    TaxonDetail,
    TaxonSummary,
)

__all__ = [
    "IdentificationCandidate",
    "OccurrenceAggregate",
    "OccurrencePage",
    "Region",
    "ResolvedPlace",
    "Settings",
    "TaxonDetail",
    "TaxonSummary",
    "__version__",
]

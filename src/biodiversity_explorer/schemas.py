"""
Domain models for the biodiversity explorer.

Pydantic models for records built from the two providers (GBIF and
iNaturalist). These define the canonical schema - datasources normalize
API responses to these and nothing downstream reads raw provider dicts.

All models are frozen: they are derived from provider data and never
mutated after construction.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Geography
# =============================================================================


class Region(BaseModel):
    """An administrative region (county) as issued by GBIF's GADM browse."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., description="GADM gid, e.g. KEN.30_1")
    name: str = Field(..., description="Canonical region name")


class PlaceCandidate(BaseModel):
    """One iNaturalist autocomplete hit, in provider relevance order."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str | None = None
    display_name: str | None = None


class ResolvedPlace(BaseModel):
    """Outcome of mapping a region name onto an iNaturalist place.

    ``place_id`` is None when no candidate was found or the lookup failed;
    callers treat that as "no results available".
    """

    model_config = ConfigDict(frozen=True)

    query_name: str
    place_id: str | None = None
    matched_name: str | None = None

    @property
    def resolved(self) -> bool:
        return self.place_id is not None


# =============================================================================
# Taxonomy
# =============================================================================


class TaxonSummary(BaseModel):
    """Compact taxon record shared by species counts and vision results."""

    model_config = ConfigDict(frozen=True)

    id: int
    scientific_name: str
    common_name: str | None = None
    iconic_group: str | None = None
    photo_url: str | None = None

    @property
    def display_name(self) -> str:
        """Human-friendly name: common name if available, else scientific."""
        if self.common_name:
            return f"{self.common_name} ({self.scientific_name})"
        return self.scientific_name


class OccurrenceAggregate(BaseModel):
    """One distinct taxon observed in a place, with its observation count."""

    model_config = ConfigDict(frozen=True)

    taxon: TaxonSummary
    observation_count: int = Field(..., ge=0)


class TaxonDetail(BaseModel):
    """Descriptive record for a single taxon, fetched on demand."""

    model_config = ConfigDict(frozen=True)

    id: int
    rank: str | None = None
    iconic_group: str | None = None
    is_extinct: bool = False
    summary_html: str | None = None
    photo_urls: tuple[str, ...] = Field(default_factory=tuple, max_length=10)


class IdentificationCandidate(BaseModel):
    """A ranked computer-vision suggestion."""

    model_config = ConfigDict(frozen=True)

    taxon: TaxonSummary
    confidence: float = Field(..., ge=0.0, le=1.0)


# =============================================================================
# Raw occurrence search
# =============================================================================


class OccurrencePage(BaseModel):
    """One page of GBIF occurrence search results.

    Records are passed through as returned by GBIF; the occurrence schema is
    wide and the consumers only pick a handful of fields.
    """

    model_config = ConfigDict(frozen=True)

    total: int = 0
    records: list[dict[str, Any]] = Field(default_factory=list)

"""
Resolve GBIF region names to iNaturalist place ids.

iNaturalist has no notion of a Kenyan county and no shared identifier with
GBIF, so regions are joined by name through ``/places/autocomplete``.
Autocomplete is global: an unqualified name such as "Kajiado" or "Busia"
may also match a place in another country. The default rule prefers
candidates whose display label carries the country qualifier and
otherwise trusts the provider's own ranking:

1. First candidate whose ``display_name`` contains the qualifier ("Kenya").
2. Otherwise the first candidate overall.
3. No candidates → unresolved (``place_id=None``).

This is a precision heuristic, not a guarantee. A region whose only hits
are same-named places elsewhere resolves to the wrong place. Known bad
matches are corrected with explicit ``overrides`` rather than by changing
the rule; ``flows/verify_places.py`` reports how every region resolves.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

import requests

from biodiversity_explorer.config import get_settings
from biodiversity_explorer.datasources.inaturalist import client
from biodiversity_explorer.datasources.inaturalist.parsing import parse_place_candidates
from biodiversity_explorer.schemas import PlaceCandidate, ResolvedPlace

logger = logging.getLogger(__name__)


# =============================================================================
# Matching rule (pure)
# =============================================================================


def choose_place(
    candidates: Sequence[PlaceCandidate],
    qualifier: str = "Kenya",
) -> PlaceCandidate | None:
    """Pick a candidate: first qualifier-labelled one, else the first one."""
    for candidate in candidates:
        if qualifier and qualifier in (candidate.display_name or ""):
            return candidate
    return candidates[0] if candidates else None


class PlaceMatchStrategy(Protocol):
    """Chooses one autocomplete candidate for a region name."""

    def choose(self, name: str, candidates: Sequence[PlaceCandidate]) -> PlaceCandidate | None: ...


@dataclass(frozen=True)
class CountryBiasedMatch:
    """Default strategy: prefer candidates labelled with the country."""

    qualifier: str = "Kenya"

    def choose(self, name: str, candidates: Sequence[PlaceCandidate]) -> PlaceCandidate | None:
        return choose_place(candidates, self.qualifier)


# =============================================================================
# Resolver (I/O)
# =============================================================================


class PlaceResolver:
    """
    Map region names to iNaturalist places.

    ``resolve()`` never raises: transport errors and empty autocomplete
    results both produce an unresolved ``ResolvedPlace``.

    Args:
        strategy: Candidate selection rule (default ``CountryBiasedMatch``
            with the configured country qualifier).
        per_page: Autocomplete page size, 3-5 (default from settings).
        overrides: Region name → place id, bypassing autocomplete.
        cache: Memoize successful resolutions on this instance.
    """

    def __init__(
        self,
        strategy: PlaceMatchStrategy | None = None,
        *,
        per_page: int | None = None,
        overrides: Mapping[str, str] | None = None,
        cache: bool = False,
    ) -> None:
        settings = get_settings()
        self.strategy = strategy or CountryBiasedMatch(settings.country_qualifier)
        self.per_page = per_page or settings.autocomplete_per_page
        if not 3 <= self.per_page <= 5:
            msg = f"per_page must be between 3 and 5, got {self.per_page}"
            raise ValueError(msg)
        self.overrides = dict(overrides or {})
        self._cache: dict[str, ResolvedPlace] | None = {} if cache else None

    def candidates(self, name: str) -> list[PlaceCandidate]:
        """Autocomplete candidates for ``name``. Transport errors propagate."""
        payload = client.autocomplete_places(name, self.per_page)
        return parse_place_candidates(payload)

    def resolve(self, name: str) -> ResolvedPlace:
        """Resolve a region name to a place id, or an unresolved result."""
        query = name.strip()
        if not query:
            return ResolvedPlace(query_name=name)

        if query in self.overrides:
            return ResolvedPlace(query_name=name, place_id=str(self.overrides[query]))

        if self._cache is not None and query in self._cache:
            return self._cache[query]

        try:
            candidates = self.candidates(query)
        except (requests.RequestException, ValueError) as e:
            logger.warning("Place lookup failed for %r: %s", query, e)
            return ResolvedPlace(query_name=name)

        choice = self.strategy.choose(query, candidates)
        if choice is None:
            logger.info("No iNaturalist place found for %r", query)
            return ResolvedPlace(query_name=name)

        resolved = ResolvedPlace(
            query_name=name,
            place_id=choice.id,
            matched_name=choice.display_name or choice.name,
        )
        if self._cache is not None:
            self._cache[query] = resolved
        return resolved


def resolve_place(name: str) -> ResolvedPlace:
    """Resolve a region name with the default resolver."""
    return PlaceResolver().resolve(name)

"""
iNaturalist API client.

Low-level HTTP helpers for the iNaturalist API v1. Errors propagate to the
calling datasource module, which decides how to fail soft.

API docs: https://api.inaturalist.org/v1/docs/
Rate limits: ~1 req/sec, 10k/day. Nothing here throttles; bulk callers
pace themselves (see ``flows/verify_places.py``).
"""

from __future__ import annotations

from typing import Any

from biodiversity_explorer.config import get_settings
from biodiversity_explorer.services.http import session

SOURCE = "inaturalist.org"

MAX_SPECIES_COUNTS_PER_PAGE = 500  # API maximum for /observations/species_counts


def _url(endpoint: str) -> str:
    return f"{get_settings().inat_api_base.rstrip('/')}/{endpoint.lstrip('/')}"


def _auth_headers() -> dict[str, str]:
    token = get_settings().inat_api_token
    return {"Authorization": token} if token else {}


def _get(endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    """GET an iNaturalist API v1 endpoint and return the decoded JSON body."""
    resp = session.get(_url(endpoint), params=params or {})
    resp.raise_for_status()
    data: dict[str, Any] = resp.json()
    return data


def _post(
    endpoint: str,
    *,
    data: dict[str, Any] | None = None,
    files: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """POST a multipart form to an iNaturalist API v1 endpoint."""
    resp = session.post(_url(endpoint), data=data or {}, files=files, headers=_auth_headers())
    resp.raise_for_status()
    body: dict[str, Any] = resp.json()
    return body


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def autocomplete_places(q: str, per_page: int) -> dict[str, Any]:
    """GET /places/autocomplete — free-text place search."""
    return _get("places/autocomplete", {"q": q, "per_page": per_page})


def get_species_counts(params: dict[str, Any]) -> dict[str, Any]:
    """GET /observations/species_counts — species with observation counts."""
    return _get("observations/species_counts", params)


def get_taxon(taxon_id: int) -> dict[str, Any]:
    """GET /taxa/{id} — full taxon record including photos."""
    return _get(f"taxa/{taxon_id}")


def score_image(image: bytes, lat: float, lng: float) -> dict[str, Any]:
    """POST /computervision/score_image — ranked vision suggestions."""
    return _post(
        "computervision/score_image",
        data={"lat": lat, "lng": lng},
        files={"image": ("image.jpg", image, "application/octet-stream")},
    )
